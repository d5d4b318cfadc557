"""CLI command implementations for the charting engine.

Each command module provides:
- Configuration loading and validation
- Command execution logic
- Integration with core library functions
"""

from charting.commands.view import load_view_config, run_view, summarize_view

__all__ = [
    "load_view_config",
    "run_view",
    "summarize_view",
]
