"""Allow ``python -m logex``."""

import sys

from logex.cli import main

sys.exit(main())
