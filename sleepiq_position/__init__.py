"""Move a SleepIQ bed foundation to a preset and wait for it to settle."""

from __future__ import annotations

__version__ = "1.0.0"
