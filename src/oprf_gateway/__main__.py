"""Allow ``python -m oprf_gateway``."""

import sys

from .cli import main

sys.exit(main())
