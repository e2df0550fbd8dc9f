"""Raw binary capture input.

A raw capture is a flat file of packed sample words, unit_size bytes each,
with no header (the format logic analyzers dump as "binary"). It is turned
into the transcoder's event feed: LogicSamples chunks, an optional Trigger
at a chosen sample index, and a closing End.
"""

import os
from typing import Iterator, Optional

from .errors import CaptureLoadError, ConfigError
from .transcoder import End, LogicSamples, Trigger

DEFAULT_CHUNK_SIZE = 4096   # Bytes per LogicSamples block


def _chunk_bytes(unit_size: int, chunk_size: int) -> int:
    """Round chunk_size down to whole sample words (at least one)."""
    if unit_size < 1:
        raise ConfigError(f"Unit size must be at least 1, got {unit_size}")
    if chunk_size < 1:
        raise ConfigError(f"Chunk size must be at least 1, got {chunk_size}")
    return max(unit_size, chunk_size - chunk_size % unit_size)


def _split_at_trigger(data: bytes, unit_size: int, first_sample: int,
                      trigger: Optional[int]):
    """Yield events for one chunk, inserting Trigger before its sample."""
    n_samples = len(data) // unit_size
    if trigger is not None and first_sample <= trigger < first_sample + n_samples:
        cut = (trigger - first_sample) * unit_size
        if cut:
            yield LogicSamples(data[:cut], unit_size)
        yield Trigger()
        yield LogicSamples(data[cut:], unit_size)
    else:
        yield LogicSamples(data, unit_size)


def iter_events(data: bytes, unit_size: int,
                chunk_size: int = DEFAULT_CHUNK_SIZE,
                trigger: Optional[int] = None) -> Iterator:
    """Event feed over an in-memory capture.

    Args:
        data: Packed sample bytes
        unit_size: Bytes per sample word
        chunk_size: Bytes per LogicSamples event (rounded to whole words)
        trigger: Sample index the trigger fires on, or None
    """
    step = _chunk_bytes(unit_size, chunk_size)
    sample = 0
    for pos in range(0, len(data), step):
        chunk = bytes(data[pos:pos + step])
        yield from _split_at_trigger(chunk, unit_size, sample, trigger)
        sample += len(chunk) // unit_size
    if trigger is not None and trigger == sample:
        # Trigger right after the last sample.
        yield Trigger()
    yield End()


def read_capture(path: str, unit_size: int,
                 chunk_size: int = DEFAULT_CHUNK_SIZE,
                 trigger: Optional[int] = None) -> Iterator:
    """Event feed streamed from a raw capture file.

    The file is checked right away; its contents are read one chunk at a
    time while the feed is consumed, so captures of any size work.

    Raises:
        CaptureLoadError if the file is missing, unreadable or fails mid-read
    """
    step = _chunk_bytes(unit_size, chunk_size)
    if not os.path.isfile(path):
        raise CaptureLoadError(f"File not found: {path}")
    if not os.access(path, os.R_OK):
        raise CaptureLoadError(f"Cannot read {path}: permission denied")
    return _stream_file(path, unit_size, step, trigger)


def _stream_file(path: str, unit_size: int, step: int,
                 trigger: Optional[int]) -> Iterator:
    try:
        with open(path, 'rb') as f:
            sample = 0
            while True:
                chunk = f.read(step)
                if not chunk:
                    break
                yield from _split_at_trigger(chunk, unit_size, sample, trigger)
                sample += len(chunk) // unit_size
    except OSError as e:
        raise CaptureLoadError(f"Cannot read {path}: {e}") from e

    if trigger is not None and trigger == sample:
        yield Trigger()
    yield End()
