"""gl: generate a LICENSE file for your project."""
from .cli import VERSION as __version__
from .cli import main

__all__ = ["__version__", "main"]
