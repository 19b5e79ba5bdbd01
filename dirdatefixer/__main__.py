"""Allow ``python -m dirdatefixer``."""

import sys

from .cli import main

sys.exit(main())
