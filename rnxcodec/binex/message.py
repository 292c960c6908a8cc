"""Framing of BINEX messages

Description:
------------

A forward readable BINEX message is framed as::

    sync byte | record ID (ubnxi) | message length (ubnxi) | message | checksum

The sync byte tells the byte order of the message and whether it uses enhanced checksums. Setting the lowest bit of
the sync byte marks the message as deflate compressed (raw deflate, no zlib header):

| Sync   | Byte order    | Checksums |
|--------|---------------|-----------|
| `0xC2` | little endian | regular   |
| `0xE2` | big endian    | regular   |
| `0xC8` | little endian | enhanced  |
| `0xE8` | big endian    | enhanced  |

Reverse readable messages (sync bytes `0xD2`, `0xF2`, `0xD8` and `0xF8`) are recognized but not supported.

The `FrameDecoder` reads messages from a stream fed in chunks of bytes. A frame failing its checksum, or failing to
inflate, is reported as corrupt, after which the decoder looks for the next sync byte starting one byte after the
failed one. The declared length of a failed frame is never trusted. Further failed candidates found while
resynchronizing belong to the same corruption and are not reported again.

Example:
--------

    >>> msg = Message.new(0x7F, b"payload")
    >>> messages, errors = decode_messages(write_message(msg))
    >>> messages == [msg]
    True

"""

# Standard library imports
from collections import namedtuple
import zlib

# Midgard imports
from midgard.dev.timer import Timer

# rnxcodec imports
from rnxcodec.binex import checksum
from rnxcodec.binex import records
from rnxcodec.binex import ubnxi
from rnxcodec.lib import config
from rnxcodec.lib import exceptions
from rnxcodec.lib import log

COMPRESSED_BIT = 0x01

# Forward readable sync bytes: (big endian, enhanced checksums)
FORWARD_SYNC = {0xC2: (False, False), 0xE2: (True, False), 0xC8: (False, True), 0xE8: (True, True)}
REVERSED_SYNC = {0xD2, 0xF2, 0xD8, 0xF8}
SYNC_BYTES = {s | c for s in set(FORWARD_SYNC) | REVERSED_SYNC for c in (0, COMPRESSED_BIT)}


def sync_byte(big_endian, enhanced_crc, compressed):
    """The sync byte for a forward readable message"""
    byte = {v: k for k, v in FORWARD_SYNC.items()}[(bool(big_endian), bool(enhanced_crc))]
    return byte | COMPRESSED_BIT if compressed else byte


class Message(namedtuple("Message", ["record_id", "payload", "big_endian", "enhanced_crc", "compressed", "wire"])):
    """One BINEX message

    Args:
        record_id (int):      Record ID, deciding the layout of the payload.
        payload (bytes):      The message, inflated if it was compressed.
        big_endian (bool):    Byte order of the message.
        enhanced_crc (bool):  Whether the message uses enhanced checksums.
        compressed (bool):    Whether the message is deflate compressed on the wire.
        wire (bytes):         The message as it was read, None for new messages.
    """

    __slots__ = ()

    @classmethod
    def new(cls, record_id, payload, big_endian=None, enhanced_crc=None, compressed=None):
        """Create a message, using the configured defaults for options that are not given"""
        big_endian = config.codec.get("big_endian", value=big_endian, section="binex").bool
        enhanced_crc = config.codec.get("enhanced_crc", value=enhanced_crc, section="binex").bool
        compressed = config.codec.get("compress", value=compressed, section="binex").bool
        return cls(record_id, bytes(payload), big_endian, enhanced_crc, compressed, None)

    @classmethod
    def from_content(cls, record_id, content, **options):
        """Create a message from a decoded record, see `rnxcodec.binex.records`"""
        big_endian = config.codec.get("big_endian", value=options.pop("big_endian", None), section="binex").bool
        payload = records.encode(record_id, content, big_endian=big_endian)
        return cls.new(record_id, payload, big_endian=big_endian, **options)

    @property
    def content(self):
        """The decoded record, None for record IDs that are not known"""
        return records.decode(self)

    @property
    def wire_payload(self):
        """The message bytes as written on the wire"""
        if self.wire is not None:
            return self.wire
        if self.compressed:
            deflate = zlib.compressobj(wbits=-15)
            return deflate.compress(self.payload) + deflate.flush()
        return self.payload

    def _replace(self, **changes):
        """Copy of the message with new values, encoded anew on the wire when payload or compression changes"""
        if "wire" not in changes and {"payload", "compressed"} & set(changes):
            changes["wire"] = None
        return super()._replace(**changes)

    def __eq__(self, other):
        if not isinstance(other, Message):
            return NotImplemented
        return self[:5] == other[:5]

    def __hash__(self):
        return hash(self[:5])

    def __repr__(self):
        return (
            f"Message(record_id=0x{self.record_id:02x}, num_bytes={len(self.payload)}, big_endian={self.big_endian}, "
            f"enhanced_crc={self.enhanced_crc}, compressed={self.compressed})"
        )


def write_message(message):
    """Frame a message

    Args:
        message (Message):  Message to write.

    Returns:
        Bytes: The framed message.
    """
    wire = message.wire_payload
    body = ubnxi.encode(message.record_id, message.big_endian) + ubnxi.encode(len(wire), message.big_endian) + wire
    sync = sync_byte(message.big_endian, message.enhanced_crc, message.compressed)
    return bytes([sync]) + body + checksum.calculate(body, message.enhanced_crc, message.big_endian)


def _inflate(wire):
    inflate = zlib.decompressobj(wbits=-15)
    try:
        payload = inflate.decompress(wire) + inflate.flush()
    except zlib.error as err:
        raise exceptions.FramingError(f"Compressed message does not inflate: {err}") from None
    if not inflate.eof:
        raise exceptions.FramingError("Compressed message ends before the end of the deflate stream")
    return payload


def parse_frame(buffer, start, max_length):
    """Parse the frame starting at a sync byte

    Args:
        buffer (bytes):     Bytes to read from.
        start (int):        Position of the sync byte.
        max_length (int):   Longest accepted message.

    Returns:
        Tuple: The message and the position after the frame, or None if the frame is not complete.
    """
    sync = buffer[start]
    if sync & ~COMPRESSED_BIT in REVERSED_SYNC:
        raise exceptions.FramingError(f"Reverse readable BINEX (sync byte 0x{sync:02x}) is not supported")
    if sync & ~COMPRESSED_BIT not in FORWARD_SYNC:
        raise exceptions.FramingError(f"Invalid sync byte 0x{sync:02x}")
    big_endian, enhanced = FORWARD_SYNC[sync & ~COMPRESSED_BIT]

    try:
        record_id, id_size = ubnxi.decode(buffer, start + 1, big_endian)
        length, length_size = ubnxi.decode(buffer, start + 1 + id_size, big_endian)
    except exceptions.TruncationError:
        return None
    if length > max_length:
        raise exceptions.FramingError(f"Declared message length {length} is longer than {max_length}")

    begin = start + 1 + id_size + length_size
    end = begin + length
    kind = checksum.checksum_kind(end - start - 1, enhanced)
    if end + kind.value > len(buffer):
        return None

    body = bytes(buffer[start + 1 : end])
    expected = checksum.calculate(body, enhanced, big_endian)
    if bytes(buffer[end : end + kind.value]) != expected:
        raise exceptions.ChecksumError(
            f"{kind.name.upper()} checksum of record 0x{record_id:02x} is {bytes(buffer[end : end + kind.value]).hex()}, "
            f"expected {expected.hex()}"
        )

    wire = bytes(buffer[begin:end])
    compressed = bool(sync & COMPRESSED_BIT)
    payload = _inflate(wire) if compressed else wire
    return Message(record_id, payload, big_endian, enhanced, compressed, wire), end + kind.value


class FrameDecoder:
    """Read BINEX messages from a stream of bytes

    Args:
        max_message_length (int):  Longer declared message lengths are treated as corruption.
    """

    def __init__(self, max_message_length=None):
        self.max_message_length = config.codec.get(
            "max_message_length", value=max_message_length, section="binex"
        ).int
        self.errors = list()
        self.num_messages = 0
        self.final = False
        self._buffer = bytearray()
        self._offset = 0
        self._resyncing = False

    @property
    def position(self):
        """Position in the stream of the first byte not yet consumed"""
        return self._offset

    def feed(self, data):
        """Add bytes to the end of the stream"""
        self._buffer.extend(data)

    def close(self):
        """Signal that no more bytes will be fed"""
        self.final = True

    def _consume(self, num_bytes):
        del self._buffer[:num_bytes]
        self._offset += num_bytes

    def _find_sync(self):
        for idx, byte in enumerate(self._buffer):
            if byte in SYNC_BYTES:
                return idx
        return None

    def _valid_frame_after(self, start):
        """Whether a complete and valid frame starts somewhere after the given position"""
        for idx in range(start + 1, len(self._buffer)):
            if self._buffer[idx] not in SYNC_BYTES:
                continue
            try:
                if parse_frame(self._buffer, idx, self.max_message_length) is not None:
                    return True
            except exceptions.FramingError:
                continue
        return False

    def next_message(self):
        """Read the next message

        Returns:
            Message: The next message, or None if more bytes are needed.
        """
        while True:
            idx = self._find_sync()
            if idx is None:
                self._consume(len(self._buffer))
                return None
            self._consume(idx)

            try:
                frame = parse_frame(self._buffer, 0, self.max_message_length)
                if frame is None and self.final:
                    if not self._valid_frame_after(0):
                        raise exceptions.TruncationError(
                            f"Stream ended inside a frame at byte {self._offset}", index=self.num_messages
                        )
                    raise exceptions.FramingError("Incomplete frame followed by more frames")
            except exceptions.FramingError as err:
                err.index = self.num_messages
                self._consume(1)
                if self._resyncing:
                    log.debug(f"Still resynchronizing at byte {self._offset}: {err}")
                    continue
                self._resyncing = True
                self.errors.append(err)
                log.warn(f"Corrupt BINEX frame before byte {self._offset}: {err}")
                raise

            if frame is None:
                return None
            message, size = frame
            self._consume(size)
            self._resyncing = False
            self.num_messages += 1
            return message

    def __iter__(self):
        """Iterate over messages, collecting corrupt frames in `errors`"""
        while True:
            try:
                message = self.next_message()
            except exceptions.FramingError:
                continue
            if message is None:
                return
            yield message


def decode_messages(data, final=True, **options):
    """Decode all messages of a stream

    Args:
        data (bytes):   BINEX stream.
        final (bool):   Whether the stream is complete. A trailing incomplete frame is then a TruncationError.
        options:        Options passed on to `FrameDecoder`.

    Returns:
        Tuple: List of messages and list of errors for corrupt frames.
    """
    decoder = FrameDecoder(**options)
    decoder.feed(data)
    if final:
        decoder.close()

    messages = list()
    with Timer("Finish decoding BINEX messages in", logger=log.time):
        try:
            for message in decoder:
                messages.append(message)
        except exceptions.TruncationError as err:
            err.partial = messages
            raise
    if decoder.errors:
        log.warn(f"Found {len(decoder.errors)} corrupt frames among {len(messages)} BINEX messages")
    return messages, decoder.errors
