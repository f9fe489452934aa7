"""Allow ``python -m multilog``."""

import sys

from multilog.cli import main

sys.exit(main())
