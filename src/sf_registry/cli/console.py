"""Shared Rich console for user-facing output.

Everything the operator reads goes through :data:`console` (stderr);
diagnostic events go through structlog instead.
"""

from __future__ import annotations

from rich.console import Console

console = Console(stderr=True, highlight=False)
