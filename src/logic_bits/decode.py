"""Bit extraction from packed logic sample buffers.

Sample layout (unit_size bytes per sample, little-endian bit numbering):

    sample 0: [byte 0][byte 1]...[byte unit_size-1]
    sample 1: [byte 0][byte 1]...

Channel with bit index k lives in byte k // 8 of each word, at bit k % 8.
"""

from typing import Sequence

import numpy as np

from .errors import ProtocolViolation


def bit_position(unit_size: int, sample_offset: int, bit_index: int) -> tuple:
    """Return (byte_pos, bit_pos) of a channel's bit within the buffer."""
    return sample_offset * unit_size + bit_index // 8, bit_index % 8


def sample_bit(buffer: bytes, unit_size: int, sample_offset: int,
               bit_index: int) -> str:
    """Decode one channel of one sample as '0' or '1'.

    Raises:
        ProtocolViolation if the bit lies outside the buffer
    """
    byte_pos, bit_pos = bit_position(unit_size, sample_offset, bit_index)
    if not 0 <= byte_pos < len(buffer):
        raise ProtocolViolation(
            f"Sample {sample_offset}, bit {bit_index} is outside the "
            f"{len(buffer)}-byte buffer")
    return '1' if buffer[byte_pos] & (1 << bit_pos) else '0'


def decode_block(buffer: bytes, unit_size: int,
                 bit_indices: Sequence[int]) -> np.ndarray:
    """Unpack selected channels from every whole sample in the buffer.

    Args:
        buffer: Packed sample bytes; a trailing partial word is ignored
        unit_size: Bytes per sample word
        bit_indices: Bit position of each channel, in output order

    Returns:
        uint8 array, shape (n_samples, len(bit_indices)), values 0/1
    """
    if unit_size < 1:
        raise ProtocolViolation(f"Invalid unit size: {unit_size}")
    for idx in bit_indices:
        if not 0 <= idx < unit_size * 8:
            raise ProtocolViolation(
                f"Bit index {idx} does not fit a {unit_size}-byte sample")

    n_samples = len(buffer) // unit_size
    if n_samples == 0:
        return np.zeros((0, len(bit_indices)), dtype=np.uint8)
    words = np.frombuffer(buffer, dtype=np.uint8,
                          count=n_samples * unit_size)
    words = words.reshape(n_samples, unit_size)

    bits = np.empty((n_samples, len(bit_indices)), dtype=np.uint8)
    for j, idx in enumerate(bit_indices):
        bits[:, j] = (words[:, idx // 8] >> (idx % 8)) & 1
    return bits
