from functools import wraps


# User facing messages, one per kind of failure.
MESSAGES = {
    'invalid_format': 'Invalid format',
    'divide_by_zero': 'Cannot divide by zero',
    'unknown_operator': 'Unknown operator: {}',
}


class CalcError(Exception):
    '''
    Base of every error the calculator reports back to the user.

    None of them are fatal. The buffer is left as it was, ready for further
    edits.
    '''
    MESSAGE = MESSAGES['invalid_format']

    def __init__(self, *args):
        super().__init__(*(args or (type(self).MESSAGE,)))


class InvalidEdit(CalcError):
    '''
    Edit would break the shape of the expression being typed.
    '''


class InvalidExpression(CalcError):
    '''
    Expression can't be evaluated: missing operands, dangling operators, bad
    numbers.
    '''


class DivideByZero(CalcError):
    MESSAGE = MESSAGES['divide_by_zero']


def wrap_user_errors(fmt, error=InvalidExpression):
    '''
    Decorator that converts stray exceptions into calculator errors.

    Passes through CalcErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except Exception as e:
                raise error(fmt.format(*args, **kwargs), e)
        return wrapper
    return decorator
