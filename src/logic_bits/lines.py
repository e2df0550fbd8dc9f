"""Per-channel line buffers and the trigger marker slot.

A rendered line looks like:

    D0:10101010 11110000 1
    T:           ^ 9

Bits are grouped in eights by a single space; the trigger row's caret sits
under the column the trigger fell on, so its indent counts those spaces too.
"""

from typing import Optional

from .channels import ChannelSpec

GROUP_SIZE = 8        # Bits between cosmetic separators
TRIGGER_PREFIX = 'T:'


class LineBuffer:
    """In-progress text line for one channel."""

    def __init__(self, channel: ChannelSpec):
        self.owner_channel = channel
        self._seed = f"{channel.display_name}:"
        self._parts = [self._seed]

    @property
    def text(self) -> str:
        return ''.join(self._parts)

    def append_bit(self, bit: str):
        self._parts.append(bit)

    def append_separator(self):
        self._parts.append(' ')

    def flush_and_reset(self) -> str:
        """Return the completed line and reseed the buffer with the name."""
        text = self.text
        self._parts = [self._seed]
        return text


def trigger_indent(column: int) -> int:
    """Characters between 'T:' and the caret for a trigger at column."""
    return column + column // GROUP_SIZE


class TriggerTracker:
    """Single-slot record of where the last trigger landed in the line.

    A newer trigger overwrites an unrendered one.
    """

    def __init__(self):
        self.pending = None

    def record(self, column: int):
        self.pending = column

    def render(self) -> Optional[str]:
        """Return the marker row for the pending trigger and clear it."""
        if self.pending is None:
            return None
        column = self.pending
        self.pending = None
        return f"{TRIGGER_PREFIX}{' ' * trigger_indent(column)}^ {column}\n"
