"""Streaming transcoder: packed logic samples to fixed-width bit lines.

Event feed:
    Trigger                      Mark the current column of the line
    LogicSamples(data, unit_size)  A block of packed sample words
    End                          Flush whatever partial line is left

Output: one text block per LogicSamples event that produced text, plus an
optional final block at End. The first LogicSamples block starts with the
header. Each full line is emitted as one row per channel:

    D0:10101010 11110000
    D1:00001111 00001111
    T:       ^ 7

The trigger row follows the last channel of a width-triggered flush only;
the partial flush at End never carries one.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from . import __version__
from .channels import Channel, select_logic_channels
from .decode import decode_block
from .errors import ConfigError, ProtocolViolation
from .lines import GROUP_SIZE, LineBuffer, TriggerTracker
from .units import samplerate_string

DEFAULT_WIDTH = 64    # Samples per rendered line
PROGRAM_NAME = f"logic-bits {__version__}"

# Session states
AWAITING_FIRST_DATA = 'awaiting_first_data'
STREAMING = 'streaming'
ENDED = 'ended'

_BIT_CHARS = ('0', '1')


@dataclass
class Trigger:
    """Trigger fired at the current sample position."""
    pass


@dataclass
class LogicSamples:
    """A block of packed sample words."""
    data: bytes
    unit_size: int


@dataclass
class End:
    """End of the acquisition."""
    pass


def parse_options(options: Optional[dict]) -> int:
    """Validate session options and return the line width.

    Raises:
        ConfigError on an unknown option or a width below 1
    """
    width = DEFAULT_WIDTH
    for key, value in (options or {}).items():
        if key == 'width':
            try:
                width = int(str(value).strip())
            except ValueError:
                raise ConfigError("Invalid width.") from None
            if width < 1:
                raise ConfigError("Invalid width.")
        else:
            raise ConfigError(f"Unknown parameter '{key}'.")
    return width


def build_header(program: str, n_enabled: int, n_total: int,
                 samplerate: Optional[int] = None) -> str:
    """Preamble emitted once, ahead of the first data block.

    The acquisition line is left out when the sample rate is unknown.
    """
    header = f"{program}\n"
    if samplerate is not None:
        header += (f"Acquisition with {n_enabled}/{n_total} channels "
                   f"at {samplerate_string(samplerate)}\n")
    return header


class BitsTranscoder:
    """One output session rendering logic samples as ASCII bits.

    Usage:
        with BitsTranscoder(channels, {'width': 32}, samplerate=1000000) as t:
            for block in t.transcode(events):
                out.write(block)
    """

    def __init__(self, channels: Iterable[Channel],
                 options: Optional[dict] = None,
                 samplerate: Optional[int] = None,
                 program: str = PROGRAM_NAME):
        self.width = parse_options(options)

        all_channels = list(channels)
        self.channels = select_logic_channels(all_channels)
        self.lines = [LineBuffer(ch) for ch in self.channels]
        self.column_count = 0
        self.trigger = TriggerTracker()
        self.state = AWAITING_FIRST_DATA
        self.closed = False

        self._bit_indices = [ch.bit_index for ch in self.channels]
        self._header = build_header(program, len(self.channels),
                                    len(all_channels), samplerate)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def pending_trigger(self) -> Optional[int]:
        return self.trigger.pending

    @property
    def pending_lines(self) -> List[str]:
        """Current in-progress text of every channel line."""
        return [line.text for line in self.lines]

    def receive(self, event) -> Optional[str]:
        """Consume one feed event and return the text it produced, if any."""
        if self.closed:
            raise ProtocolViolation("Session used after close")
        if self.state == ENDED:
            raise ProtocolViolation(
                f"{type(event).__name__} received after End")

        if isinstance(event, Trigger):
            self.trigger.record(self.column_count)
            return None
        if isinstance(event, LogicSamples):
            return self._receive_logic(event)
        if isinstance(event, End):
            return self._receive_end()
        raise ProtocolViolation(f"Unknown event: {event!r}")

    def transcode(self, events: Iterable) -> Iterator[str]:
        """Feed every event and yield each non-empty output block."""
        for event in events:
            block = self.receive(event)
            if block:
                yield block

    def close(self):
        """Release the line buffers. Safe to call more than once."""
        if self.closed:
            return
        self.lines = []
        self._header = None
        self.closed = True

    def _receive_logic(self, packet: LogicSamples) -> Optional[str]:
        if packet.unit_size < 1:
            raise ProtocolViolation(f"Invalid unit size: {packet.unit_size}")

        # Rejected blocks must leave the session untouched.
        bits = decode_block(packet.data, packet.unit_size, self._bit_indices)

        out = []
        if self._header is not None:
            # First data block carries the header.
            out.append(self._header)
            self._header = None
        self.state = STREAMING

        last = len(self.lines) - 1
        for row in bits.tolist():
            self.column_count += 1
            for line, bit in zip(self.lines, row):
                line.append_bit(_BIT_CHARS[bit])

            if self.column_count == self.width:
                for j, line in enumerate(self.lines):
                    out.append(line.flush_and_reset() + '\n')
                    if j == last:
                        marker = self.trigger.render()
                        if marker:
                            out.append(marker)
                self.column_count = 0
            elif self.column_count % GROUP_SIZE == 0:
                for line in self.lines:
                    line.append_separator()

        return ''.join(out) or None

    def _receive_end(self) -> Optional[str]:
        self.state = ENDED
        if not self.column_count:
            return None
        out = [line.flush_and_reset() + '\n' for line in self.lines]
        self.column_count = 0
        return ''.join(out) or None
