"""Allow running the path tracer with ``python -m src.pathtracer``."""

import sys

from src.pathtracer.cli import main

sys.exit(main())
