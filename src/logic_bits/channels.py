"""Channel selection for packed logic sample words.

A device exposes an ordered list of channels. Only enabled logic channels
are rendered; each keeps the bit position the driver assigned it within
the packed sample word (positions need not be contiguous).
"""

from dataclasses import dataclass
from typing import Iterable, List

from .errors import ConfigError

CHANNEL_LOGIC = 'logic'
CHANNEL_ANALOG = 'analog'


@dataclass
class Channel:
    """A device channel as reported by the acquisition side."""
    index: int                         # Bit position within the sample word
    name: str
    type: str = CHANNEL_LOGIC
    enabled: bool = True


@dataclass(frozen=True)
class ChannelSpec:
    """An enabled logic channel, fixed for the whole session."""
    bit_index: int
    display_name: str


def select_logic_channels(channels: Iterable[Channel],
                          require: bool = False) -> List[ChannelSpec]:
    """Keep the enabled logic channels, in their original order.

    Args:
        channels: All channels of the device, in enumeration order
        require: Raise if no channel survives the selection

    Returns:
        List of ChannelSpec

    Raises:
        ConfigError if require is set and nothing is enabled
    """
    specs = [ChannelSpec(ch.index, ch.name) for ch in channels
             if ch.type == CHANNEL_LOGIC and ch.enabled]
    if require and not specs:
        raise ConfigError("No enabled logic channels.")
    return specs


def default_channels(unit_size: int) -> List[Channel]:
    """One logic channel per bit of the sample word, named D0, D1, ..."""
    return [Channel(i, f"D{i}") for i in range(unit_size * 8)]


def parse_channel_list(text: str, unit_size: int) -> List[Channel]:
    """Parse a CLI channel list into device channels.

    Accepted forms:
        "4"              D0..D3 on bits 0-3
        "CLK,DATA"       names assigned to bits 0, 1, ...
        "CLK=3,DATA=0"   explicit bit positions

    Every bit of the sample word not named is reported as a disabled
    channel, so the header's channel total matches the word size.
    """
    n_bits = unit_size * 8
    text = text.strip()
    if not text:
        raise ConfigError("Empty channel list.")

    if text.isdigit():
        count = int(text)
        if not 1 <= count <= n_bits:
            raise ConfigError(
                f"Channel count must be 1-{n_bits} for a {unit_size}-byte "
                f"sample word, got {count}")
        names = [(f"D{i}", i) for i in range(count)]
    else:
        names = []
        for pos, item in enumerate(text.split(',')):
            name, _, bit = item.partition('=')
            name = name.strip()
            if not name:
                raise ConfigError(f"Empty channel name in '{text}'")
            names.append((name, _parse_bit(bit, pos, n_bits)))

    used = {}
    for name, bit in names:
        if bit in used:
            raise ConfigError(
                f"Channels '{used[bit]}' and '{name}' both use bit {bit}")
        used[bit] = name

    channels = [Channel(bit, name) for name, bit in names]
    channels.extend(Channel(i, f"D{i}", enabled=False)
                    for i in range(n_bits) if i not in used)
    return channels


def _parse_bit(bit: str, default: int, n_bits: int) -> int:
    bit = bit.strip()
    if not bit:
        value = default
    elif bit.isdigit():
        value = int(bit)
    else:
        raise ConfigError(f"Invalid bit index '{bit}'")
    if value >= n_bits:
        raise ConfigError(
            f"Bit index {value} is outside the {n_bits}-bit sample word")
    return value
