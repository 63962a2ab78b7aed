"""Allow ``python -m buzzer_quiz``."""

import sys

from .cli import main

sys.exit(main())
