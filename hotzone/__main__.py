"""Allow ``python -m hotzone``."""

import sys

from hotzone.main import main

sys.exit(main())
