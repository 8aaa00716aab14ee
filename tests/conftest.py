from typing import Callable

from pytest import fixture

from calcpad.buffer import Buffer
from calcpad.cli import CLI


def press(buffer: Buffer, keys: str) -> Buffer:
    '''
    Press every key in turn, as the keypad would.

    Spaces are only there for legibility and are skipped.
    '''
    for key in keys.replace(' ', ''):
        buffer.dispatch(*CLI.KEYS[key])
    return buffer


@fixture
def keyed() -> Callable[[str], Buffer]:
    '''
    Return a function building a buffer from key presses.
    '''
    def build(keys: str) -> Buffer:
        return press(Buffer(), keys)
    return build
