"""Character differencing of text lines in Compact RINEX

Description:
------------

Epoch lines and the LLI/SSI flags of each satellite change little from one epoch to the next, so Compact RINEX only
sends the characters that changed. A differenced line is compared position by position with the previous line:

| Character in token | Meaning                                         |
|--------------------|-------------------------------------------------|
| space              | Keep the character of the previous line         |
| `&`                | The character changed to a space                 |
| other              | The new character                                |

Characters beyond the end of the previous line are sent as they are. When the new line is shorter than the previous
one, each non-space character that disappears is sent as `&`, so that the decoder can tell a shorter line from one
that did not change. Tokens and lines are compared without trailing spaces.

A full line, sent at the start of a file and after a reset, starts with a marker instead. In Compact RINEX 1 the
marker `&` replaces the leading blank of the epoch line, while in Compact RINEX 3 the `>` which starts every RINEX 3
epoch line is itself the marker.

"""

# rnxcodec imports
from rnxcodec.lib import exceptions

SPACE_MARKER = "&"


def encode_line(previous, line):
    """Difference a line against the previous line

    Args:
        previous (str):  The previous line, empty if there is none.
        line (str):      The new line.

    Returns:
        String: Differenced line.
    """
    line = line.rstrip()
    if SPACE_MARKER in line:
        raise exceptions.FormatError(f"Line containing {SPACE_MARKER!r} can not be differenced: {line!r}")
    previous = previous.rstrip()

    chars = list()
    for old, new in zip(previous, line):
        if old == new:
            chars.append(" ")
        else:
            chars.append(SPACE_MARKER if new == " " else new)
    chars.extend(line[len(previous) :])
    chars.extend(" " if old == " " else SPACE_MARKER for old in previous[len(line) :])
    return "".join(chars).rstrip()


def decode_line(previous, token):
    """Restore a line from the previous line and a differenced line

    Args:
        previous (str):  The previous line, empty if there is none.
        token (str):     Differenced line.

    Returns:
        String: The restored line, without trailing spaces.
    """
    previous = previous.rstrip()
    token = token.rstrip()
    chars = list(previous.ljust(len(token)))
    for idx, char in enumerate(token):
        if char == SPACE_MARKER:
            chars[idx] = " "
        elif char != " ":
            chars[idx] = char
    return "".join(chars).rstrip()


def encode_full_line(line, marker):
    """Mark a line as a full line, not differenced against the previous line"""
    line = line.rstrip()
    if marker == SPACE_MARKER:
        if not line.startswith(" "):
            raise exceptions.FormatError(f"Full line must start with a blank: {line!r}")
        return f"{marker}{line[1:]}"
    if not line.startswith(marker):
        raise exceptions.FormatError(f"Full line must start with {marker!r}: {line!r}")
    return line


def is_full_line(token, marker):
    return token.startswith(marker)


def decode_full_line(token, marker):
    """Restore a full line, see `encode_full_line`"""
    token = token.rstrip()
    if marker == SPACE_MARKER:
        return f" {token[1:]}"
    return token
