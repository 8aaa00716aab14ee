import logging

from .lexer import Number


logger = logging.getLogger(__name__)


class Parser:
    '''
    Infix to postfix (RPN) converter. Shunting-yard, without the parentheses.
    '''

    # All left associative.
    PRECEDENCE = {
        '+': 1,
        '-': 1,
        '*': 2,
        '/': 2,
    }

    def postfix(self, tokens):
        '''
        Reorder infix tokens into postfix order. Evaluates nothing.
        '''
        output = []
        operators = []
        for token in tokens:
            if isinstance(token, Number):
                output.append(token)
                continue
            precedence = type(self).PRECEDENCE[token.symbol]
            # >=, not >, for left associativity: 8 - 3 - 2 is (8 - 3) - 2.
            while operators and \
                  type(self).PRECEDENCE[operators[-1].symbol] >= precedence:
                output.append(operators.pop())
            operators.append(token)
        output.extend(reversed(operators))
        logger.debug('Postfix: %s', ' '.join(map(str, output)))
        return output
