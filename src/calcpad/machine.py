from collections import deque
from decimal import Decimal
import logging
import math
import operator

from .lexer import Number
from .util import DivideByZero, InvalidExpression, MESSAGES


logger = logging.getLogger(__name__)


def _checked_truediv(left, right):
    '''
    Division that refuses a zero divisor, rather than raising
    ZeroDivisionError halfway through.
    '''
    if right == 0.0:
        raise DivideByZero()
    return operator.__truediv__(left, right)


class Machine:
    '''
    Arithmetic stack machine.

    Takes postfix tokens and runs them on a stack of floats.
    '''

    # Binary operators only; there are no unary ones, signs are part of the
    # number.
    OPERATORS = {
        '+': operator.__add__,
        '-': operator.__sub__,
        '*': operator.__mul__,
        '/': _checked_truediv,
    }

    def __init__(self):
        '''
        Create empty stack machine.
        '''
        self.stack = deque()

    def run(self, tokens):
        '''
        Run all postfix tokens on a fresh stack and return the single result.
        '''
        self.clrstack()
        for token in tokens:
            self.feed(token)
        if len(self.stack) != 1:
            logger.debug('%d element(s) left on stack', len(self.stack))
            raise InvalidExpression()
        return self.stack[-1]

    def feed(self, token):
        '''
        Stack a number, or apply an operator to the top of the stack.
        '''
        if isinstance(token, Number):
            self._pshstack(token.value)
        else:
            self._apply(token.symbol)

    def _apply(self, symbol):
        '''
        Pop both operands, apply operator, push result.
        '''
        try:
            f = type(self).OPERATORS[symbol]
        except KeyError:
            raise InvalidExpression(
                MESSAGES['unknown_operator'].format(symbol)) from None
        # Right operand on top: 9 3 / is 9 / 3, not 3 / 9.
        right, left = self._popstack(2)
        self._pshstack(f(left, right))

    def clrstack(self):
        '''
        Clear everything from the stack.
        '''
        self.stack.clear()

    def _pshstack(self, *new):
        '''
        Push all elements onto stack, leftmost at the bottom.
        '''
        self.stack.extend(new)

    def _popstack(self, n=1):
        '''
        Pop specified number of args from stack, topmost first.
        '''
        if len(self.stack) < n:
            logger.debug('Less than %d element(s) on stack', n)
            raise InvalidExpression()
        return [self.stack.pop() for _ in range(n)]

    @staticmethod
    def format(number):
        '''
        Render number for display: whole numbers without a fractional part,
        everything else as the shortest round-tripping decimal, written out
        positionally (0.00001, never 1e-05) so it can be edited further.
        '''
        if number % 1.0 == 0.0:
            return str(int(number))
        if not math.isfinite(number):
            return repr(number)
        return format(Decimal(repr(number)), 'f')
