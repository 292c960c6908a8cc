"""Differencing of numeric fields in Compact RINEX

Description:
------------

Each numeric field of a Compact RINEX file (an observation of one satellite, or the receiver clock offset) is sent as
a finite difference of the integer mantissas of the field. The state of one field is a `History`, holding the last
value and its differences::

    diffs[0]   last value
    diffs[1]   first difference
    diffs[k]   k-th difference

A field is transmitted as one of three tokens:

| Token      | Meaning                                                                   |
|------------|---------------------------------------------------------------------------|
| `3&123456` | Reset. Discard the history and start a new arc of order 3 at value 123456 |
| `-42`      | The highest available difference of the new value                         |
| (empty)    | The value is absent. The history is not changed                           |

After a reset the order of the differences grows by one for each value until it reaches the order of the arc. So with
order 3 the second value is sent as a first difference, the third as a second difference and all following values as
third differences.

The functions here never keep state themselves. The caller owns the histories and passes them in and out of each call.

Example:
--------

    >>> token, history = encode_value(None, 123456)
    >>> token
    '3&123456'
    >>> encode_value(history, 123460)[0]
    '4'

"""

# Standard library imports
from collections import namedtuple

# rnxcodec imports
from rnxcodec.lib import exceptions

# Differences must fit in the 18 digits of a signed 64 bit integer
MAX_DIFFERENCE = 10 ** 18

RESET_MARKER = "&"


class History(namedtuple("History", ["order", "diffs"])):
    """State of one differencing arc

    Args:
        order (int):    Highest difference sent for this arc.
        diffs (Tuple):  The last value followed by its differences.
    """

    __slots__ = ()

    @property
    def value(self):
        return self.diffs[0]


def _check_overflow(number):
    if abs(number) >= MAX_DIFFERENCE:
        raise exceptions.DifferenceOverflowError(f"Difference {number} can not be represented")
    return number


def encode_value(history, value, order=3):
    """Encode one value as a difference token

    Args:
        history (History):  State of the arc, None if there is no arc.
        value (int):        Integer mantissa of the new value, None if the value is absent.
        order (int):        Order of a new arc.

    Returns:
        Tuple: Token and the new state of the arc.
    """
    if value is None:
        return "", history

    _check_overflow(value)
    if history is None:
        return f"{order}{RESET_MARKER}{value}", History(order, (value,))

    num_diffs = min(len(history.diffs), history.order)
    diffs = [value]
    for idx in range(num_diffs):
        diffs.append(_check_overflow(diffs[idx] - history.diffs[idx]))
    return str(diffs[-1]), History(history.order, tuple(diffs))


def decode_value(history, token, max_order=9, default_order=3):
    """Decode one difference token

    A plain difference token without an arc starts a new arc, with the token taken as the value itself.

    Args:
        history (History):   State of the arc, None if there is no arc.
        token (str):         Reset, difference or blank token.
        max_order (int):     Highest order accepted in a reset token.
        default_order (int): Order of arcs started without a reset token.

    Returns:
        Tuple: Integer mantissa of the value (None if absent) and the new state of the arc.
    """
    token = token.strip()
    if not token:
        return None, history

    order_text, marker, number = token.rpartition(RESET_MARKER)
    try:
        number = int(number)
        order = int(order_text) if marker else None
    except ValueError:
        raise exceptions.FormatError(f"Invalid difference token {token!r}") from None
    _check_overflow(number)

    if marker:
        if not 0 <= order <= max_order:
            raise exceptions.FormatError(f"Reset order {order} in token {token!r} is not between 0 and {max_order}")
        return number, History(order, (number,))
    if history is None:
        return number, History(default_order, (number,))

    num_diffs = min(len(history.diffs), history.order)
    diffs = [0] * num_diffs + [number]
    for idx in range(num_diffs, 0, -1):
        diffs[idx - 1] = _check_overflow(diffs[idx] + history.diffs[idx - 1])
    return diffs[0], History(history.order, tuple(diffs))
