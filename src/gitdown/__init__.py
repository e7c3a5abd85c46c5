"""gitdown — expand JSON directives embedded in Markdown documents."""

from __future__ import annotations

__version__ = "0.1.0"
