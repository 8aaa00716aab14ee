from collections import namedtuple
from functools import reduce
import logging
import operator

import regex

from .util import InvalidExpression, wrap_user_errors


logger = logging.getLogger(__name__)


class Number(namedtuple('Number', 'text')):
    '''
    Run of digits, at most one dot, optional leading unary minus and optional
    trailing percent sign.
    '''
    __slots__ = ()

    def __str__(self):
        return self.text

    @property
    def percent(self):
        return self.text.endswith('%')

    @property
    @wrap_user_errors("Cannot convert '{0.text}'")
    def value(self):
        '''
        Float value of number. 50% is 0.5.
        '''
        if self.percent:
            return float(self.text[:-1]) / 100
        return float(self.text)


class Operator(namedtuple('Operator', 'symbol')):
    '''
    Binary operator, always one of + - * /.
    '''
    __slots__ = ()

    def __str__(self):
        return self.symbol


class Lexer:
    '''
    Lexer for the calculator's infix grammar.

    Holds no state. Spaces are insignificant, since the buffer only uses them
    to pad binary operators.
    '''
    # What the keypad may show, to what the machine understands
    OPERATORS = {
        '+': '+',
        '-': '-',
        '*': '*',
        '/': '/',
        'x': '*',
    }

    assert not [symbol
                for symbol
                in OPERATORS
                if len(symbol) != 1]
    # Character class of all of the above
    SYMBOLS = r'[+\-*/x]'
    assert regex.fullmatch(SYMBOLS + r'+', ''.join(OPERATORS))
    # A minus is a sign rather than a subtraction at the very start, or right
    # after another operator.
    SIGN = r'(?<!' + r'[^+\-*/x]' + r')-'
    # Anything else is a subtraction. Never both, so no ambiguity.
    OPERATOR = r'''
                (?:
                    [+*/x]
                    |
                    (?<=[^+\-*/x])-
                )
                '''
    # Any single unit of a number's body
    BODY = r'''
            (?:
                \d
                |
                \.
                |
                %
            )
            '''
    # Number, signed or not. A lone sign is still a number, albeit one that
    # won't convert. Keep it so that evaluation can say so.
    NUMBER = r'''
              (?:
                  {SIGN}
                  {BODY}*
              )|(?:
                  {BODY}+
              )
              '''.format(SIGN=SIGN, BODY=BODY)

    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<operator>' + OPERATOR + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)
    PATTERN = regex.compile(LEXEME, flags=FLAGS)

    def lex(self, line):
        '''
        Take a line and yield all tokens.

        Raises InvalidExpression on the first character that isn't part of a
        number or an operator.
        '''
        line = line.replace(' ', '')
        pos = 0
        while pos < len(line):
            match = type(self).PATTERN.match(line, pos)
            if match is None:
                logger.debug('Lexing stopped at %d in %r', pos, line)
                raise InvalidExpression("Couldn't lex {0}".format(line[pos:]))
            yield self.token(match)
            pos = match.end()

    def token(self, match):
        '''
        Build token from lexeme match.
        '''
        groups = self.matchedgroups(match)
        if 'number' in groups:
            return Number(groups['number'])
        return Operator(type(self).OPERATORS[groups['operator']])

    def matchedgroups(self, match):
        '''
        Return lexeme matches.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}
