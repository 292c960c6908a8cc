"""Compression and decompression of Compact RINEX streams

Example:
--------

    from rnxcodec import crinex
    record = crinex.decompress_record(crx_bytes)       # Compact RINEX -> ObservationRecord
    crx_bytes = crinex.compress_record(record)         # ObservationRecord -> Compact RINEX
    rnx_bytes = crinex.decompress(crx_bytes)           # Compact RINEX -> RINEX text

Description:
------------

A Compact RINEX file starts with two CRINEX header lines followed by the RINEX header, copied verbatim. Each epoch in
the body consists of

1. the epoch line, with all satellites listed after the epoch flag. The first epoch line, and every epoch line after a
   reset, is sent as a full line starting with the full line marker. Other epoch lines are differenced against the
   previous epoch line (see `rnxcodec.crinex.line`).
2. the receiver clock offset, differenced as a numeric field (see `rnxcodec.crinex.field`). The line is empty when
   there is no clock offset.
3. one line for each satellite on the epoch line. The line holds one difference token for each observable declared in
   the header, separated by single spaces, optionally followed by a space and the differenced LLI/SSI flags.

A full epoch line resets every arc. A satellite missing from one epoch loses its arcs, so they are restarted with
reset tokens when it appears again. Special event epochs (flags 2 to 5) are sent as full lines followed by their
header records verbatim. They do not change any arc and are not used as the reference of the next epoch line.

The decompressor is a state machine fed one line at a time::

    await_header -> await_epoch -> in_epoch -> await_epoch -> ... -> done
                                -> in_event -> await_epoch

A malformed epoch either aborts the decompression or is skipped, depending on the `on_error` option. Skipped errors
are available in `Decompressor.errors`.

"""

# Standard library imports
from datetime import datetime, timezone

# Midgard imports
from midgard.dev.timer import Timer

# rnxcodec imports
from rnxcodec.crinex import field
from rnxcodec.crinex import layout as layouts
from rnxcodec.crinex import line as linediff
from rnxcodec.data.header import CrinexInfo
from rnxcodec.data.observation import Cell, ObservationEpoch
from rnxcodec.data.record import ObservationRecord
from rnxcodec.lib import config
from rnxcodec.lib import exceptions
from rnxcodec.lib import log
from rnxcodec.lib.enums import DecoderState, ErrorPolicy
from rnxcodec.rinex import read_header, read_observations, write_header, write_observations

CRINEX_VERS_LABEL = "CRINEX VERS   / TYPE"
CRINEX_PROG_LABEL = "CRINEX PROG / DATE"
CRINEX_DATE_FORMAT = "%d-%b-%y %H:%M"

# Slot of the receiver clock offset among the (satellite, observable) slots
CLOCK_SLOT = (None, "clock")


def _slot_name(slot):
    sv, code = slot
    return code if sv is None else f"{sv}:{code}"


def _text(data):
    if not isinstance(data, (bytes, bytearray)):
        return data
    try:
        return data.decode("ascii")
    except UnicodeDecodeError as err:
        raise exceptions.FormatError(f"Stream is not ASCII text: {err}", index=err.start) from None


def format_crinex_header(info, crinex_version):
    """The two CRINEX header lines"""
    return [
        f"{crinex_version:<20s}{'COMPACT RINEX FORMAT':<40s}{CRINEX_VERS_LABEL}",
        f"{info.program:<40s}{info.date:<20s}{CRINEX_PROG_LABEL}",
    ]


class Decompressor:
    """Decompress a Compact RINEX stream into an observation record

    Args:
        max_order (int):      Highest order accepted in a reset token.
        default_order (int):  Order of arcs started without a reset token.
        on_error (str):       What to do with malformed epochs, `abort` or `skip`.
    """

    def __init__(self, max_order=None, default_order=None, on_error=None):
        self.max_order = config.codec.get("max_order", value=max_order, section="crinex").int
        self.default_order = config.codec.get("order", value=default_order, section="crinex").int
        self.on_error = ErrorPolicy(config.codec.get("on_error", value=on_error, section="crinex").str)

        self.state = DecoderState.await_header
        self.errors = list()
        self.record = None
        self.layout = None
        self._header_lines = list()
        self._crinex = None

        # Differencing state
        self._epoch_ref = ""
        self._clock = None
        self._arcs = dict()
        self._flags = dict()
        self._previous_sats = list()
        self._broken = set()
        self._lost = list()

        # State of the current epoch
        self._num_epochs = 0
        self._epoch = None
        self._sats = list()
        self._content = None
        self._line_idx = 0
        self._remaining = 0
        self._event = None

    @property
    def index(self):
        """Index of the current epoch"""
        return self._num_epochs

    def feed(self, line):
        """Feed the next line of the stream to the decompressor"""
        line = line.rstrip("\r\n")
        if self.state == DecoderState.await_header:
            self._read_header_line(line)
        elif self.state == DecoderState.await_epoch:
            self._read_epoch_line(line)
        elif self.state in (DecoderState.in_epoch, DecoderState.skip_epoch):
            self._read_epoch_body(line)
        elif self.state == DecoderState.in_event:
            self._read_event_line(line)
        else:
            raise exceptions.FormatError(f"Line after the end of the stream: {line!r}", index=self.index)

    def finish(self):
        """Signal the end of the stream

        Returns:
            ObservationRecord: The decompressed record.
        """
        if self.state == DecoderState.await_header:
            raise exceptions.TruncationError(
                f"Stream ended in the header after {len(self._header_lines)} lines", partial=self.record
            )
        if self.state != DecoderState.await_epoch:
            raise exceptions.TruncationError(
                f"Stream ended in the middle of an epoch ({self.state.name})", index=self.index, partial=self.record
            )
        self.state = DecoderState.done
        return self.record

    #
    # HEADER
    #
    def _read_header_line(self, line):
        num_lines = len(self._header_lines)
        if num_lines == 0:
            if not line[60:].startswith("CRINEX VERS"):
                raise exceptions.FormatError(f"Stream does not start with {CRINEX_VERS_LABEL!r}: {line!r}")
            self.layout = layouts.from_crinex_version(line[:20].strip())
            self._crinex = CrinexInfo(line[:20].strip())
        elif num_lines == 1:
            if not line[60:].startswith("CRINEX PROG"):
                raise exceptions.FormatError(f"Second line is not {CRINEX_PROG_LABEL!r}: {line!r}")
            self._crinex = self._crinex._replace(program=line[:40].strip(), date=line[40:60].strip())
        self._header_lines.append(line)
        if line[60:].strip() != "END OF HEADER":
            return

        header = read_header(iter(self._header_lines[2:]))
        header.crinex = self._crinex
        expected = layouts.from_rinex_version(header.major_version)
        if expected != self.layout:
            raise exceptions.FormatError(
                f"Compact RINEX {self.layout.crinex_version} can not hold RINEX {header.version} observations"
            )
        self.record = ObservationRecord(header)
        self.state = DecoderState.await_epoch
        log.debug(f"Decompressing Compact RINEX {self.layout.crinex_version} with RINEX {header.version} header")

    #
    # EPOCHS
    #
    def _read_epoch_line(self, token):
        marker = self.layout.marker
        if linediff.is_full_line(token, marker):
            line = linediff.decode_full_line(token, marker)
        else:
            line = linediff.decode_line(self._epoch_ref, token)

        try:
            epoch_line, sats = self.layout.parse_epoch_line(line)
        except exceptions.CodecError as err:
            err.index = self.index
            raise

        if epoch_line.flag.is_event:
            self._event = (line, list())
            self._remaining = epoch_line.num_sat
            self.state = DecoderState.in_event
            if not self._remaining:
                self._finish_event()
            return

        if linediff.is_full_line(token, marker):
            log.debug(f"Reset of all arcs at epoch {self.index}")
            self._clock = None
            self._arcs.clear()
            self._flags.clear()
            self._broken.clear()
        self._epoch_ref = line
        self._drop_missing(sats)

        self._epoch = epoch_line.epoch
        self._sats = sats
        self._content = ObservationEpoch()
        self._line_idx = 0
        self.state = DecoderState.in_epoch

    def _drop_missing(self, sats):
        """Drop the arcs of satellites missing from the new epoch"""
        current = set(sats)
        for sv in set(self._previous_sats) - current:
            self._drop_satellite(sv)
        self._previous_sats = sats

    def _drop_satellite(self, sv):
        self._flags.pop(sv, None)
        for key in [k for k in self._arcs if k[0] == sv]:
            del self._arcs[key]
        self._broken -= {k for k in self._broken if k[0] == sv}

    def _break_slot(self, slot):
        """Forget the arc of a slot until a reset token restores it"""
        if slot == CLOCK_SLOT:
            self._clock = None
        else:
            self._arcs.pop(slot, None)
        self._broken.add(slot)

    def _break_satellite(self, sv, codes):
        for code in codes:
            self._break_slot((sv, code))
        self._flags.pop(sv, None)
        self._broken.add((sv, None))

    def _read_epoch_body(self, line):
        try:
            if self._line_idx == 0:
                self._content.clock = self._decode_clock(line)
            else:
                sv = self._sats[self._line_idx - 1]
                self._content.satellites[sv] = self._decode_satellite(sv, line)
        except (exceptions.FormatError, exceptions.DifferenceOverflowError) as err:
            self._handle_error(err)

        self._line_idx += 1
        if self._line_idx > len(self._sats):
            self._finish_epoch()

    def _finish_epoch(self):
        if self._lost:
            slots = ", ".join(_slot_name(s) for s in self._lost)
            err = exceptions.FormatError(f"No values for {slots} until their arcs are reset", index=self.index)
            log.warn(f"Epoch {self.index}: {err}")
            self.errors.append(err)
            self._lost.clear()

        if self.state == DecoderState.in_epoch:
            self.record.add(self._epoch, self._content)
        self._num_epochs += 1
        self.state = DecoderState.await_epoch

    def _decode_clock(self, token):
        try:
            clock, self._clock = self._decode_field(CLOCK_SLOT, self._clock, token)
        except (exceptions.FormatError, exceptions.DifferenceOverflowError):
            self._break_slot(CLOCK_SLOT)
            raise
        return clock

    def _decode_field(self, slot, history, token):
        if slot in self._broken:
            if field.RESET_MARKER not in token:
                if token.strip():
                    self._lost.append(slot)
                return None, None
            self._broken.discard(slot)
            log.debug(f"Arc of {_slot_name(slot)} restored by a reset at epoch {self.index}")

        value, new_history = field.decode_value(history, token, self.max_order, self.default_order)
        if field.RESET_MARKER in token:
            if self._crinex.order is None:
                self._crinex = self._crinex._replace(order=new_history.order)
                self.record.header.crinex = self._crinex
        elif history is None and new_history is not None:
            log.debug(f"New arc of order {self.default_order} without reset marker at epoch {self.index}")
        return value, new_history

    def _decode_satellite(self, sv, line):
        codes = self.record.header.observables(sv)
        tokens = line.split(" ", len(codes))
        flag_token = tokens.pop() if len(tokens) > len(codes) else ""
        if len(flag_token) > 2 * len(codes):
            self._break_satellite(sv, codes)
            raise exceptions.FormatError(f"More fields than the {len(codes)} declared observables for {sv}: {line!r}")
        tokens.extend("" for _ in range(len(codes) - len(tokens)))

        try:
            flags = linediff.decode_line(self._flags.get(sv, ""), flag_token)
        except exceptions.FormatError:
            self._break_satellite(sv, codes)
            raise
        self._flags[sv] = flags
        flags = flags.ljust(2 * len(codes))
        flags_known = (sv, None) not in self._broken

        cells = dict()
        first_error = None
        for idx, (code, token) in enumerate(zip(codes, tokens)):
            key = (sv, code)
            try:
                value, history = self._decode_field(key, self._arcs.get(key), token)
            except (exceptions.FormatError, exceptions.DifferenceOverflowError) as err:
                self._break_slot(key)
                if first_error is None:
                    first_error = err
                continue
            if history is not None:
                self._arcs[key] = history
            if value is None:
                continue
            if flags_known:
                cells[code] = Cell(value, flags[2 * idx], flags[2 * idx + 1])
            else:
                self._lost.append(key)

        if first_error is not None:
            raise first_error
        return cells

    def _handle_error(self, err):
        """Abort, or decode the rest of the epoch without keeping it"""
        err.index = self.index
        if self.on_error == ErrorPolicy.abort:
            raise err

        log.warn(f"Skipping epoch {self.index}: {err}")
        self.errors.append(err)
        self.state = DecoderState.skip_epoch

    #
    # EVENTS
    #
    def _read_event_line(self, line):
        self._event[1].append(line)
        self._remaining -= 1
        if self._remaining <= 0:
            self._finish_event()

    def _finish_event(self):
        epoch_line, lines = self._event
        self.record.add_event(epoch_line, lines)
        self._event = None
        self.state = DecoderState.await_epoch


class Compressor:
    """Compress an observation record into a Compact RINEX stream

    Args:
        header (Header):       Header of the record.
        order (int):           Order of new arcs. Default is the order of a decompressed stream, or the configuration.
        reset_interval (int):  Reset all arcs every `reset_interval` epochs, 0 means only at the first epoch.
        program (str):         Program name written to the CRINEX header.
    """

    def __init__(self, header, order=None, reset_interval=None, program=None):
        if order is None and header.crinex is not None:
            order = header.crinex.order
        self.header = header
        self.layout = layouts.from_rinex_version(header.major_version)
        self.order = config.codec.get("order", value=order, section="crinex").int
        self.reset_interval = config.codec.get("reset_interval", value=reset_interval, section="crinex").int
        self.program = program

        self._num_epochs = 0
        self._epoch_ref = ""
        self._clock = None
        self._arcs = dict()
        self._flags = dict()
        self._previous_sats = list()
        self._broken = set()
        self._lost = list()

    def header_lines(self):
        """The CRINEX header lines followed by the RINEX header"""
        if self.header.crinex is not None and self.program is None:
            info = self.header.crinex
        else:
            program = config.codec.get("program", value=self.program, section="crinex").str
            date = datetime.now(timezone.utc).strftime(CRINEX_DATE_FORMAT)
            info = CrinexInfo(self.layout.crinex_version, program, date, self.order)
        return format_crinex_header(info, self.layout.crinex_version) + write_header(self.header)

    def encode_epoch(self, epoch, content):
        """Compress one epoch

        Args:
            epoch (Epoch):                  Time and flag.
            content (ObservationEpoch):     Clock offset and observations.

        Returns:
            List: Lines of the compressed epoch.
        """
        sats = list(content.satellites)
        line = self.layout.format_epoch_line(epoch, sats)
        if self._num_epochs == 0 or (self.reset_interval and self._num_epochs % self.reset_interval == 0):
            lines = [linediff.encode_full_line(line, self.layout.marker)]
            self._clock = None
            self._arcs.clear()
            self._flags.clear()
        else:
            lines = [linediff.encode_line(self._epoch_ref, line)]
        self._epoch_ref = line

        current = set(sats)
        for sv in set(self._previous_sats) - current:
            self._flags.pop(sv, None)
            for key in [k for k in self._arcs if k[0] == sv]:
                del self._arcs[key]
        self._previous_sats = sats

        token, self._clock = field.encode_value(self._clock, content.clock, self.order)
        lines.append(token)
        for sv, cells in content.satellites.items():
            lines.append(self._encode_satellite(sv, cells))
        self._num_epochs += 1
        return lines

    def _encode_satellite(self, sv, cells):
        tokens = list()
        flags = list()
        for code in self.header.observables(sv):
            key = (sv, code)
            cell = cells.get(code)
            token, history = field.encode_value(self._arcs.get(key), None if cell is None else cell.mantissa, self.order)
            if history is not None:
                self._arcs[key] = history
            tokens.append(token)
            flags.append("  " if cell is None else f"{cell.lli or ' '}{cell.ssi or ' '}")

        flags = "".join(flags)
        flag_token = linediff.encode_line(self._flags.get(sv, ""), flags)
        self._flags[sv] = flags.rstrip()
        line = " ".join(tokens)
        return f"{line} {flag_token}" if flag_token else line.rstrip()

    def encode_event(self, event):
        """Compress a special event epoch: a full epoch line followed by its records verbatim"""
        return [linediff.encode_full_line(event.epoch_line, self.layout.marker)] + list(event.lines)


def decompress_record(data, **options):
    """Decompress a Compact RINEX stream

    Args:
        data (bytes):  Compact RINEX stream.
        options:       Options passed on to `Decompressor`.

    Returns:
        ObservationRecord: The decompressed observations.
    """
    decompressor = Decompressor(**options)
    with Timer("Finish decompressing Compact RINEX in", logger=log.time):
        for line in _text(data).splitlines():
            try:
                decompressor.feed(line)
            except exceptions.CodecError as err:
                if isinstance(err, exceptions.TruncationError) and err.partial is None:
                    err.partial = decompressor.record
                raise
        record = decompressor.finish()
    if decompressor.errors:
        log.warn(f"Skipped {len(decompressor.errors)} malformed epochs")
    return record


def compress_record(record, **options):
    """Compress an observation record to a Compact RINEX stream

    Args:
        record (ObservationRecord):  Observations to compress.
        options:                     Options passed on to `Compressor`.

    Returns:
        Bytes: The Compact RINEX stream.
    """
    compressor = Compressor(record.header, **options)
    lines = compressor.header_lines()
    for idx, (epoch, content) in enumerate(record.items()):
        for event in record.events_at(idx):
            lines.extend(compressor.encode_event(event))
        try:
            lines.extend(compressor.encode_epoch(epoch, content))
        except exceptions.CodecError as err:
            err.index = idx
            raise
    for event in record.events_at(len(record)):
        lines.extend(compressor.encode_event(event))
    return "".join(f"{line}\n" for line in lines).encode("ascii")


def decompress(data, **options):
    """Convert a Compact RINEX stream to RINEX text

    Args:
        data (bytes):  Compact RINEX stream.
        options:       Options passed on to `Decompressor`.

    Returns:
        Bytes: RINEX observation file.
    """
    return write_observations(decompress_record(data, **options)).encode("ascii")


def compress(data, **options):
    """Convert RINEX text to a Compact RINEX stream

    Args:
        data (bytes):  RINEX observation file.
        options:       Options passed on to `Compressor`.

    Returns:
        Bytes: Compact RINEX stream.
    """
    return compress_record(read_observations(_text(data)), **options)
