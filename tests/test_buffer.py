'''
Expression buffer tests
'''

from itertools import product

import regex

from calcpad.util import DivideByZero, InvalidEdit, InvalidExpression
from calcpad.buffer import Buffer, Command, State
from calcpad.cli import CLI

from pytest import raises


def test_evaluate(keyed):
    b = keyed('2 + 3')
    assert b.text == '2 + 3'
    assert b.evaluate() == State('5', '2 + 3')
    assert b.state == State('5', '2 + 3')


def test_evaluate_precedence(keyed):
    assert keyed('2 + 3 * 4 =').state == State('14', '2 + 3 * 4')
    assert keyed('8 - 3 - 2 =').text == '3'
    assert keyed('3 x 4 =').state == State('12', '3 x 4')
    assert keyed('7 / 2 =').text == '3.5'


def test_evaluate_negative(keyed):
    b = keyed('-3 + 4')
    assert b.text == '-3 + 4'
    assert b.evaluate() == State('1', '-3 + 4')


def test_evaluate_percent(keyed):
    assert keyed('50% =').state == State('0.5', '50%')


def test_evaluate_again_keeps_number(keyed):
    b = keyed('2 + 3 =')
    assert b.evaluate() == State('5', '5')
    b = Buffer('2.5')
    assert b.evaluate() == State('2.5', '2.5')


def test_result_can_be_edited(keyed):
    b = keyed('2 + 3 = * 2 =')
    assert b.state == State('10', '5 * 2')


def test_evaluate_empty():
    b = Buffer(history='1 + 1')
    assert b.evaluate() == State('', '1 + 1')


def test_divide_by_zero(keyed):
    b = keyed('10 / 0')
    with raises(DivideByZero):
        b.evaluate()
    assert b.state == State('10 / 0', '')


def test_dangling_operator():
    b = Buffer('5 -', history='1 + 1')
    with raises(InvalidExpression):
        b.evaluate()
    assert b.state == State('5 -', '1 + 1')


def test_lone_sign(keyed):
    b = keyed('5 + -')
    with raises(InvalidExpression):
        b.evaluate()
    assert b.text == '5 + -'


def test_digit_after_percent(keyed):
    b = keyed('12%')
    with raises(InvalidEdit):
        b.append_digit('1')
    assert b.text == '12%'


def test_not_a_digit():
    b = Buffer('1')
    with raises(InvalidEdit):
        b.append_digit('a')
    with raises(InvalidEdit):
        b.append_digit('12')
    assert b.text == '1'


def test_binary_operator_spaced(keyed):
    assert keyed('1 +').text == '1 + '
    assert keyed('1% /').text == '1% / '


def test_operator_without_operand():
    b = Buffer()
    for symbol in '+*/x':
        with raises(InvalidEdit):
            b.append_operator(symbol)
    assert b.text == ''
    b = Buffer('1.')
    with raises(InvalidEdit):
        b.append_operator('+')
    assert b.text == '1.'


def test_double_operator(keyed):
    b = keyed('5 +')
    with raises(InvalidEdit):
        b.append_operator('*')
    with raises(InvalidEdit):
        b.append_operator('+')
    assert b.text == '5 + '


def test_unary_minus(keyed):
    assert keyed('-').text == '-'
    assert keyed('5 + -').text == '5 + -'
    assert keyed('5 * -').text == '5 * -'
    assert keyed('5 - -').text == '5 - -'
    assert keyed('5 x -').text == '5 x -'


def test_one_unary_minus_only(keyed):
    for keys in '-', '5 + -', '5 - -':
        b = keyed(keys)
        with raises(InvalidEdit):
            b.append_operator('-')
        assert b.text == keys


def test_not_an_operator():
    b = Buffer('1')
    with raises(InvalidEdit):
        b.append_operator('^')
    assert b.text == '1'


def test_dot():
    assert Buffer().append_dot() == '0.'
    assert Buffer('-').append_dot() == '-0.'
    assert Buffer('5 + ').append_dot() == '5 + 0.'
    assert Buffer('5 + -').append_dot() == '5 + -0.'
    assert Buffer('12').append_dot() == '12.'
    assert Buffer('5 + 12').append_dot() == '5 + 12.'


def test_dot_ignored():
    assert Buffer('1.5').append_dot() == '1.5'
    assert Buffer('1.').append_dot() == '1.'
    assert Buffer('12%').append_dot() == '12%'
    assert Buffer('0.5 + 1.5').append_dot() == '0.5 + 1.5'


def test_percent():
    assert Buffer('12').append_percent() == '12%'
    assert Buffer('1 + 2.5').append_percent() == '1 + 2.5%'


def test_percent_twice(keyed):
    b = keyed('12%')
    with raises(InvalidEdit):
        b.append_percent()
    assert b.text == '12%'


def test_percent_ignored():
    assert Buffer().append_percent() == ''
    assert Buffer('5 + ').append_percent() == '5 + '
    assert Buffer('-').append_percent() == '-'
    assert Buffer('1.').append_percent() == '1.'


def test_toggle_sign():
    b = Buffer('5')
    assert b.toggle_sign() == '-5'
    assert b.toggle_sign() == '5'


def test_toggle_sign_last_number():
    b = Buffer('5 - 3')
    assert b.toggle_sign() == '5 - -3'
    assert b.toggle_sign() == '5 - 3'
    b = Buffer('2 x 1.5')
    assert b.toggle_sign() == '2 x -1.5'
    assert b.evaluate() == State('-3', '2 x -1.5')


def test_toggle_sign_percent():
    b = Buffer('12%')
    assert b.toggle_sign() == '-12%'
    assert b.toggle_sign() == '12%'


def test_toggle_sign_empty():
    b = Buffer()
    assert b.toggle_sign() == '-'
    assert b.toggle_sign() == ''


def test_toggle_sign_bare_minus():
    assert Buffer('5 + -').toggle_sign() == '5 + '


def test_toggle_sign_nothing_to_toggle():
    assert Buffer('5 + ').toggle_sign() == '5 + '
    assert Buffer('5 - ').toggle_sign() == '5 - '


def test_small_result_stays_editable():
    b = Buffer('1 / 100000')
    assert b.evaluate() == State('0.00001', '1 / 100000')
    assert b.toggle_sign() == '-0.00001'
    assert b.append_dot() == '-0.00001'
    assert b.evaluate() == State('-0.00001', '-0.00001')
    assert b.toggle_sign() == '0.00001'
    assert b.append_operator('*') == '0.00001 * '


def test_operator_after_backspaced_space(keyed):
    b = keyed('5 + <<')
    assert b.text == '5 '
    assert b.append_operator('+') == '5 + '
    b.append_digit('3')
    assert b.evaluate() == State('8', '5 + 3')


def test_backspace():
    b = Buffer('12 + ')
    assert b.backspace() == '12 +'
    assert b.backspace() == '12 '
    assert Buffer().backspace() == ''


def test_backspace_then_continue(keyed):
    b = keyed('12 + 3 < 4 =')
    assert b.state == State('16', '12 + 4')


def test_clear(keyed):
    b = keyed('2 + 3 = + 1')
    assert b.history == '2 + 3'
    assert b.clear() == State('', '')
    assert b.state == State('', '')


def test_dispatch():
    b = Buffer()
    assert b.dispatch(Command.DIGIT, '7') == '7'
    assert b.dispatch(Command.OPERATOR, '*') == '7 * '
    assert b.dispatch(Command.DOT) == '7 * 0.'
    assert b.dispatch(Command.DIGIT, '5') == '7 * 0.5'
    assert b.dispatch(Command.PERCENT) == '7 * 0.5%'
    assert b.dispatch(Command.SIGN) == '7 * -0.5%'
    assert b.dispatch(Command.BACKSPACE) == '7 * -0.5'
    assert b.dispatch(Command.EVALUATE) == State('-3.5', '7 * -0.5')
    assert b.dispatch(Command.CLEAR) == State('', '')


def test_dispatch_missing_argument():
    b = Buffer('1')
    with raises(InvalidEdit):
        b.dispatch(Command.DIGIT)
    with raises(InvalidEdit):
        b.dispatch(Command.OPERATOR)
    assert b.text == '1'


BINARY = r'[+*/x]'
OPERATOR = r'[+\-*/x]'


def holds_invariants(text):
    compact = text.replace(' ', '')
    # No operator directly followed by a binary one, and never two signs
    if regex.search(OPERATOR + BINARY, compact) or \
       regex.search(r'(?:^|' + OPERATOR + r')-' + OPERATOR, compact):
        return False
    for number in regex.findall(r'[\d.%]+', compact):
        if number.count('.') > 1 or '%' in number[:-1]:
            return False
    return True


def test_invariants_hold():
    for keys in product('10+-*.%_<', repeat=5):
        b = Buffer()
        for key in keys:
            try:
                b.dispatch(*CLI.KEYS[key])
            except InvalidEdit:
                pass
            assert holds_invariants(b.text), (keys, b.text)
