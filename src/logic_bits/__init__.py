"""logic-bits: Render packed logic-analyzer samples as ASCII bit lines.

Supports:
  - Any sample word size (1-N bytes, channels at arbitrary bit positions)
  - Chunked, unbounded input streams (state carried across blocks)
  - Fixed-width line wrapping with byte grouping every 8 samples
  - A trigger marker row aligned to the sample column it fell on
  - Raw binary capture files via the `logic-bits` command

Architecture:
  Channel selection picks the enabled logic channels.
  The decoder pulls each channel's bit out of the packed words.
  The transcoder accumulates one line per channel and emits text blocks.
"""

__version__ = '0.1.0'
