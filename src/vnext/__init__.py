"""vnext: calculate the next semantic version from commit history."""

from __future__ import annotations

__version__ = "0.4.0"
