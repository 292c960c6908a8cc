"""Definition of rnxcodec-specific exceptions

Description:
------------

Custom exceptions used by rnxcodec for more specific error messages and handling.

The codec errors form a small taxonomy. `FormatError` covers everything that is malformed in the input,
`TruncationError` means the input ended before a token, epoch or frame was complete, and `DifferenceOverflowError`
means a value or difference could not be represented. Each codec error may carry the index of the offending epoch or
message.

"""

from midgard.dev.exceptions import MidgardException  # noqa


class RnxCodecException(Exception):
    pass


class RnxCodecExit(SystemExit, RnxCodecException):
    pass


class CodecError(RnxCodecException):
    """Base class for errors raised while decoding or encoding a stream

    Args:
        message (str):  Description of the error.
        index (int):    Index of the epoch or message where the error occurred (None if not known).
    """

    def __init__(self, message, index=None):
        super().__init__(message)
        self.index = index

    def __str__(self):
        text = super().__str__()
        return text if self.index is None else f"{text} (at index {self.index})"


class FormatError(CodecError):
    pass


class UnknownObservableError(FormatError):
    pass


class FramingError(FormatError):
    pass


class ChecksumError(FramingError):
    pass


class TruncationError(CodecError):
    """The stream ended in the middle of a token, an epoch or a frame

    The part of the result that was complete before the stream ended is available as `partial`.
    """

    def __init__(self, message, index=None, partial=None):
        super().__init__(message, index=index)
        self.partial = partial


class DifferenceOverflowError(CodecError):
    pass
