from os import isatty
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging
import sys

from prompt_toolkit import PromptSession

from .util import CalcError
from .buffer import Buffer, Command, DIGITS
from .lexer import Lexer
from .parser import Parser


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    # Nothing survives the session.
                                    history=None,
                                    prompt_continuation=' ' * len(self.prompt),
                                    mouse_support=False,
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line keypad for the calculator.

    Every character of a line is a key press.
    '''

    DEFAULT_PROMPT = '> '

    # Key to command, and its argument if any
    KEYS = {
        '.': (Command.DOT, None),
        '%': (Command.PERCENT, None),
        '_': (Command.SIGN, None),
        '<': (Command.BACKSPACE, None),
        'c': (Command.CLEAR, None),
        '=': (Command.EVALUATE, None),
    }
    KEYS.update((digit, (Command.DIGIT, digit)) for digit in DIGITS)
    KEYS.update((symbol, (Command.OPERATOR, symbol))
                for symbol in Lexer.OPERATORS)

    def dumper(self):
        '''
        Dump tokens and postfix order of each line, without evaluating.
        '''
        lexer = Lexer()
        parser = Parser()
        print('<tokens>\t<postfix>')
        for line in self.args.expressions:
            try:
                tokens = list(lexer.lex(line.strip()))
            except CalcError as e:
                print(e.args[0], file=sys.stderr)
                continue
            print(' '.join(map(str, tokens)),
                  ' '.join(map(str, parser.postfix(tokens))),
                  sep='\t')

    def press(self, buffer, line):
        '''
        Feed a line of key presses to buffer.

        Stops at the first rejected key or failed evaluation.
        '''
        for key in line:
            if key.isspace():
                continue
            try:
                command, argument = type(self).KEYS[key]
            except KeyError:
                raise CalcError('No such key {}'.format(repr(key))) from None
            buffer.dispatch(command, argument)

    def show(self, buffer):
        if buffer.history:
            print(buffer.history, '=')
        print(buffer.text)

    def executor(self):
        '''
        Run keypad.
        '''
        buffer = Buffer()
        for line in self.args.expressions:
            try:
                self.press(buffer, line)
            # Abort rest of line, the buffer holds the last good text
            except CalcError as e:
                print(e.args[0], file=sys.stderr)
            logger.debug('Now %r', buffer.state)
            self.show(buffer)

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        print(Lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return where key presses come from: a prompt_toolkit session if a
        prompt was asked for, or both stdin and stdout are ttys; plain stdin
        lines otherwise.
        '''
        if self.args.prompt or \
           isatty(sys.stdin.fileno()) and isatty(sys.stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return sys.stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='Keypad calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=sys.stdin)

    def run(self, *, args=None):
        '''
        Parse args (sys.argv if None), set up logging, and run the action.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(
            level=logging.DEBUG if self.args.verbose else logging.WARNING,
            format='%(name)s: %(message)s')
        if self.args.expressions is sys.stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            sys.exit(1)
