"""Allow ``python -m riven_grader``."""
import sys

from riven_grader.cli import main

sys.exit(main())
