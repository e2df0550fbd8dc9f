"""Entry point for `python -m logic_bits`."""

import sys

from .cli import main

sys.exit(main())
