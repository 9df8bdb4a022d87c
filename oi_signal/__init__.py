"""Top-level CLI package for the OI signal analyzer."""

from __future__ import annotations

from typing import Sequence

from oi_analytics.cli import main as analyzer_main


__all__ = ["main"]


def main(argv: Sequence[str] | None = None) -> int:
    """Dispatch to the OI signal analyzer CLI."""

    return analyzer_main(argv)
