"""
Targeter Package
"""

# ------------------------------------------------------------------------------
# Nice outputs via rich
from rich.console import Console

console = Console()


# ------------------------------------------------------------------------------
# Import meta
__all__ = ["corrections", "exceptions", "linalg", "loop", "util"]
