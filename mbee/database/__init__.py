"""Element storage for MBEE."""

from .manager import DatabaseManager

__all__ = ["DatabaseManager"]
