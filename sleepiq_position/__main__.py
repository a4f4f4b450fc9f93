"""Allow running the tool with ``python -m sleepiq_position``."""

from .cli import main

raise SystemExit(main())
