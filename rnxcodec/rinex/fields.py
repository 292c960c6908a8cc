"""Exact conversion between decimal text fields and integer mantissas

Description:
------------

Values in RINEX files are fixed point decimals, like the F14.3 observations or the F12.9 receiver clock offset of
RINEX 2. Converting these through floats would lose the last digits of large values, so they are converted directly
between text and an integer mantissa at a fixed number of decimals instead.

Example:
--------

    >>> parse_decimal("  23629347.915", 3)
    23629347915
    >>> format_decimal(-353, 3, 14)
    '        -0.353'

"""

# rnxcodec imports
from rnxcodec.lib import exceptions


def parse_decimal(text, decimals):
    """Convert a decimal text field to an integer mantissa

    Blank fields are returned as None.

    Args:
        text (str):      Decimal number, like `-1.5`, `.353` or `17`.
        decimals (int):  Number of decimals of the mantissa.

    Returns:
        Integer mantissa, the value times 10**decimals.
    """
    text = text.strip()
    if not text:
        return None

    sign, digits = (-1, text[1:]) if text[0] == "-" else (1, text.lstrip("+"))
    whole, _, fraction = digits.partition(".")
    if not (whole or fraction) or not (whole + fraction).isdigit():
        raise exceptions.FormatError(f"Invalid decimal number {text!r}")

    extra = fraction[decimals:]
    if extra.strip("0"):
        raise exceptions.FormatError(f"Decimal number {text!r} has more than {decimals} decimals")
    fraction = fraction[:decimals].ljust(decimals, "0")
    return sign * int(whole + fraction if (whole + fraction) else "0")


def format_decimal(mantissa, decimals, width):
    """Format an integer mantissa as a right aligned decimal text field

    Args:
        mantissa (int):  Value times 10**decimals.
        decimals (int):  Number of decimals to write.
        width (int):     Width of the field.

    Returns:
        String with the decimal number, blank if the mantissa is None.
    """
    if mantissa is None:
        return " " * width

    whole, fraction = divmod(abs(mantissa), 10 ** decimals)
    sign = "-" if mantissa < 0 else ""
    text = f"{sign}{whole}.{fraction:0{decimals}d}" if decimals else f"{sign}{whole}"
    if len(text) > width:
        raise exceptions.DifferenceOverflowError(f"Value {text} does not fit in a field of width {width}")
    return text.rjust(width)
