"""Record loaders for various sources."""

from .base import BaseLoader
from .json_file import JSONFileLoader
from .mock import MockLoader

__all__ = ["BaseLoader", "JSONFileLoader", "MockLoader"]
