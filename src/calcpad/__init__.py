'''
Keypad calculator.

Builds an infix expression one key press at a time (digits, + - * /, dot,
percent, sign toggle, backspace, clear) and evaluates it on equals: lexed,
reordered to postfix with shunting-yard, run on a stack of floats.

Only what a pocket calculator does. No parentheses, no functions, no history
beyond the last expression evaluated.
'''

from .buffer import Buffer, Command, State
from .cli import CLI
from .lexer import Lexer
from .machine import Machine
from .parser import Parser
from .util import CalcError, DivideByZero, InvalidEdit, InvalidExpression


__all__ = 'Buffer', 'Command', 'State', 'Lexer', 'Parser', 'Machine', 'CLI', \
          'CalcError', 'InvalidEdit', 'InvalidExpression', 'DivideByZero'
