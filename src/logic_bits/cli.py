"""logic-bits CLI: Render a raw logic capture as ASCII bit lines.

Usage:
    logic-bits capture.bin                     8 channels, 64 samples/line
    logic-bits capture.bin -u 2 -c 12          2-byte words, D0..D11
    logic-bits capture.bin -c CLK=0,MOSI=3     Named channels on chosen bits
    logic-bits capture.bin -w 32 -t 100        32/line, trigger at sample 100

Pipeline:
    1. Resolve channels from the sample word size
    2. Stream the capture file in chunks
    3. Transcode each chunk and write the text blocks
"""

import argparse
import os
import sys
import time

from . import __version__
from .capture import DEFAULT_CHUNK_SIZE, read_capture
from .channels import default_channels, parse_channel_list
from .errors import LogicBitsError
from .transcoder import DEFAULT_WIDTH, BitsTranscoder, LogicSamples
from .units import parse_samplerate, samplerate_string


def _status(args, msg: str):
    """Progress line on stderr, keeping stdout for the waveform."""
    if args.verbose:
        print(msg, file=sys.stderr, flush=True)


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='logic-bits',
        description='Render a raw logic-analyzer capture as ASCII bit lines.',
        epilog="""Examples:
  logic-bits capture.bin                  D0..D7, 64 samples per line
  logic-bits capture.bin -u 2 -c 16       16 channels from 2-byte words
  logic-bits capture.bin -c SCL=0,SDA=1   Named channels on chosen bits
  logic-bits capture.bin -r 24M           Add samplerate to the header
  logic-bits capture.bin -t 500 -o out.txt  Trigger marker at sample 500""")

    parser.add_argument('input',
                        help='Raw capture file (packed sample words, no header)')
    parser.add_argument('-o', '--output', default=None,
                        help='Output text file (default: stdout)')

    # Capture layout
    parser.add_argument('-u', '--unit-size', type=int, default=1,
                        help='Bytes per sample word (default: 1)')
    parser.add_argument('-c', '--channels', default=None,
                        help='Channel count or comma list of NAME[=BIT] '
                             '(default: every bit of the word)')
    parser.add_argument('-r', '--samplerate', default=None,
                        help='Sample rate for the header, e.g. 24M, 500k, 8000')
    parser.add_argument('-t', '--trigger', type=int, default=None, metavar='SAMPLE',
                        help='Mark a trigger at this sample index')

    # Rendering
    parser.add_argument('-w', '--width', type=int, default=DEFAULT_WIDTH,
                        help=f'Samples per line (default: {DEFAULT_WIDTH})')
    parser.add_argument('--chunk-size', type=int, default=DEFAULT_CHUNK_SIZE,
                        help=f'Bytes read per block (default: {DEFAULT_CHUNK_SIZE})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show progress on stderr')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')

    args = parser.parse_args(argv)

    if args.unit_size < 1:
        parser.error(f"--unit-size must be at least 1, got {args.unit_size}")
    if args.trigger is not None and args.trigger < 0:
        parser.error(f"--trigger must be >= 0, got {args.trigger}")

    try:
        return run(args)
    except LogicBitsError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"\nUnexpected error: {type(e).__name__}: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2


def run(args) -> int:
    """Execute the conversion."""
    t0 = time.time()

    # ── 1. Channels ──
    if args.channels:
        channels = parse_channel_list(args.channels, args.unit_size)
    else:
        channels = default_channels(args.unit_size)
    samplerate = parse_samplerate(args.samplerate) if args.samplerate else None

    transcoder = BitsTranscoder(channels, {'width': args.width},
                                samplerate=samplerate)
    names = ', '.join(f"{ch.display_name}@{ch.bit_index}"
                      for ch in transcoder.channels)
    _status(args, f"Channels: {names}")
    if samplerate:
        _status(args, f"Sample rate: {samplerate_string(samplerate)}")

    # ── 2. Stream capture ──
    _status(args, f"Reading: {args.input} ({args.unit_size}-byte samples)")
    events = read_capture(args.input, args.unit_size,
                          chunk_size=args.chunk_size, trigger=args.trigger)

    n_samples = 0
    n_blocks = 0
    out = open(args.output, 'w', newline='\n') if args.output else sys.stdout
    try:
        with transcoder:
            for event in events:
                if isinstance(event, LogicSamples):
                    n_samples += len(event.data) // event.unit_size
                block = transcoder.receive(event)
                if block:
                    out.write(block)
                    n_blocks += 1
    finally:
        if out is not sys.stdout:
            out.close()
        else:
            out.flush()

    # ── 3. Summary ──
    n_lines = (n_samples + args.width - 1) // args.width
    elapsed = time.time() - t0
    if args.trigger is not None and args.trigger > n_samples:
        print(f"Warning: trigger sample {args.trigger} is past the end "
              f"of the capture ({n_samples:,} samples)", file=sys.stderr)
    elif transcoder.pending_trigger is not None:
        # Only full lines carry the marker row.
        print(f"Warning: trigger at sample {args.trigger} was not marked: "
              f"it fell after the last full {args.width}-sample line",
              file=sys.stderr)
    if args.output:
        _status(args, f"  {os.path.basename(args.output)}")
    _status(args, f"  {n_samples:,} samples, {n_lines:,} lines per channel, "
                  f"{n_blocks} blocks in {elapsed:.2f}s")
    return 0
