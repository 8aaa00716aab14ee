'''
Expression buffer: the live text of the expression being keyed in.

Every edit either applies in full or raises InvalidEdit and leaves the buffer
alone. Binary operators are padded with a space on each side; unary minus
isn't, so the text alone tells the two apart.
'''

from collections import namedtuple
from enum import Enum
import logging

import regex

from .lexer import Lexer
from .machine import Machine
from .parser import Parser
from .util import CalcError, InvalidEdit


logger = logging.getLogger(__name__)


DIGITS = '0123456789'

State = namedtuple('State', 'text history')


class Command(Enum):
    DIGIT = 'digit'
    OPERATOR = 'operator'
    DOT = 'dot'
    PERCENT = 'percent'
    SIGN = 'sign'
    BACKSPACE = 'backspace'
    CLEAR = 'clear'
    EVALUATE = 'evaluate'


class Buffer:
    '''
    Edit state machine over the expression text and the last evaluated
    expression (history).
    '''

    # Digits, dots and percent signs at the very end of the text
    TRAILING_NUMBER = regex.compile(r'[\d.%]*\Z')

    def __init__(self, text='', history=''):
        self.text = text
        self.history = history
        self.lexer = Lexer()
        self.parser = Parser()
        self.machine = Machine()

    @property
    def state(self):
        return State(self.text, self.history)

    def _reject(self, reason, *args):
        logger.debug('Rejected on %r: ' + reason, self.text, *args)
        raise InvalidEdit()

    def _trailing_number(self):
        '''
        Return digits, dot and percent of the number at the end, unsigned.
        '''
        return type(self).TRAILING_NUMBER.search(self.text).group(0)

    def _is_sign(self, index):
        '''
        Return True if the minus at index negates rather than subtracts.
        '''
        before = self.text[:index].rstrip()
        return not before or before[-1] in Lexer.OPERATORS

    def _ends_with_sign(self):
        return self.text.endswith('-') and self._is_sign(len(self.text) - 1)

    def append_digit(self, digit):
        if len(digit) != 1 or digit not in DIGITS:
            self._reject('%r is not a digit', digit)
        if self.text.endswith('%'):
            self._reject('no digits after a percentage')
        self.text += digit
        return self.text

    def append_operator(self, symbol):
        '''
        Append binary operator, or a unary minus where an operand is expected.
        '''
        if symbol not in Lexer.OPERATORS:
            self._reject('%r is not an operator', symbol)
        if symbol == '-':
            if not self.text:
                self.text = '-'
                return self.text
            if self.text.rstrip()[-1:] in Lexer.OPERATORS:
                if self._ends_with_sign():
                    self._reject('already negated')
                self.text += '-'
                return self.text
        trimmed = self.text.rstrip()
        if trimmed and trimmed[-1] in DIGITS + '%':
            self.text = trimmed + ' {} '.format(symbol)
            return self.text
        self._reject('no operand before %r', symbol)

    def append_dot(self):
        '''
        Start a decimal fraction. Never fails, but does nothing on a number
        that already has a dot or a percent sign.
        '''
        number = self._trailing_number()
        if not number:
            self.text += '0.'
        elif '.' in number or number.endswith('%'):
            logger.debug('Ignored dot after %r', number)
        else:
            self.text += '.'
        return self.text

    def append_percent(self):
        if not self.text or self.text[-1] not in DIGITS + '%':
            return self.text
        if '%' in self._trailing_number():
            self._reject('already a percentage')
        self.text += '%'
        return self.text

    def toggle_sign(self):
        '''
        Negate the number at the end of the text, or undo its negation.
        '''
        if not self.text:
            self.text = '-'
            return self.text
        trimmed = self.text.rstrip()
        end = len(trimmed)
        if trimmed.endswith('%'):
            end -= 1
        i = end - 1
        while i >= 0 and (trimmed[i] in DIGITS or trimmed[i] == '.'):
            i -= 1
        negative = i >= 0 and trimmed[i] == '-' and self._is_sign(i)
        start = i if negative else i + 1
        if start >= end:
            return self.text
        number = trimmed[start:end]
        number = number[1:] if negative else '-' + number
        self.text = self.text[:start] + number + self.text[end:]
        return self.text

    def backspace(self):
        self.text = self.text[:-1]
        return self.text

    def clear(self):
        self.text = ''
        self.history = ''
        return self.state

    def evaluate(self):
        '''
        Evaluate the text, and replace it with the result.

        The text evaluated becomes the history. Raises InvalidExpression or
        DivideByZero, with neither text nor history changed, if it can't be
        evaluated.
        '''
        if not self.text:
            return self.state
        try:
            tokens = list(self.lexer.lex(self.text))
            result = self.machine.run(self.parser.postfix(tokens))
        except CalcError as e:
            logger.debug('Failed to evaluate %r: %r', self.text, e)
            raise
        self.history, self.text = self.text, Machine.format(result)
        return self.state

    # Commands to operations. Only digits and operators take an argument.
    ACTIONS = {
        Command.DIGIT: append_digit,
        Command.OPERATOR: append_operator,
        Command.DOT: append_dot,
        Command.PERCENT: append_percent,
        Command.SIGN: toggle_sign,
        Command.BACKSPACE: backspace,
        Command.CLEAR: clear,
        Command.EVALUATE: evaluate,
    }
    ARGUMENTS = {Command.DIGIT, Command.OPERATOR}

    def dispatch(self, command, argument=None):
        '''
        Apply a command, the single entry point for a keypad.
        '''
        f = type(self).ACTIONS[command]
        if command in type(self).ARGUMENTS:
            if argument is None:
                self._reject('%s needs an argument', command.value)
            return f(self, argument)
        return f(self)
