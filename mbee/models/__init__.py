"""Data models for MBEE."""

from .element import Element
from .tree import TreeNode

__all__ = [
    "Element",
    "TreeNode"
]
