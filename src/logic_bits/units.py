"""SI formatting and parsing of sample rates for the output header."""

import re

from .errors import ConfigError

SI_PREFIXES = ['', 'k', 'M', 'G', 'T', 'P', 'E']

_RATE_RE = re.compile(r'^\s*(\d+(?:\.\d{1,9})?)\s*([kKMG]?)(?:hz|Hz|HZ)?\s*$')
_RATE_SCALE = {'': 1, 'k': 10**3, 'K': 10**3, 'M': 10**6, 'G': 10**9}


def si_string(value: int, unit: str = '') -> str:
    """Format an integer with the largest SI prefix that keeps it < 1000.

    The remainder is kept exactly, with trailing zeros dropped:
        si_string(1500000, 'Hz') -> '1.5 MHz'
        si_string(200, 'Hz')     -> '200 Hz'
    """
    i = 0
    while i + 1 < len(SI_PREFIXES) and value // 1000 ** (i + 1) >= 1:
        i += 1
    divisor = 1000 ** i
    quot, rem = divmod(value, divisor)

    fract = ''
    if i:
        fract = f".{rem:0{i * 3}d}".rstrip('0').rstrip('.')
    return f"{quot}{fract} {SI_PREFIXES[i]}{unit}"


def samplerate_string(samplerate: int) -> str:
    """Human-readable sample rate, e.g. '24 MHz'."""
    return si_string(samplerate, 'Hz')


def parse_samplerate(text: str) -> int:
    """Parse '24M', '1.5MHz', '500k' or '8000' into Hz.

    Raises:
        ConfigError on malformed or non-positive rates
    """
    m = _RATE_RE.match(str(text))
    if not m:
        raise ConfigError(f"Invalid sample rate '{text}'")
    number, prefix = m.groups()
    if '.' in number:
        whole, frac = number.split('.')
        scale = _RATE_SCALE[prefix]
        rate = int(whole) * scale + int(frac.ljust(9, '0')) * scale // 10**9
    else:
        rate = int(number) * _RATE_SCALE[prefix]
    if rate < 1:
        raise ConfigError(f"Sample rate must be positive, got '{text}'")
    return rate
