"""
MBEE: Model-Based Engineering Environment.

Converts flat lists of model records between the JMI shapes: keyed maps and
containment trees.
"""

__version__ = "0.1.0"
__author__ = "MBEE Project"

# Import main components
from .errors import (
    CustomError,
    DataFormatError,
    DuplicateKeyError,
    CircularReferenceError,
    ConversionNotImplementedError
)
from .models import Element, TreeNode
from .jmi import build_index, build_tree, build_forest, convert_jmi, create_elements_tree, flatten, sort_elements_array
from .loaders import BaseLoader, JSONFileLoader, MockLoader
from .database import DatabaseManager

__all__ = [
    "CustomError",
    "DataFormatError",
    "DuplicateKeyError",
    "CircularReferenceError",
    "ConversionNotImplementedError",
    "Element",
    "TreeNode",
    "build_index",
    "build_tree",
    "build_forest",
    "convert_jmi",
    "create_elements_tree",
    "flatten",
    "sort_elements_array",
    "BaseLoader",
    "JSONFileLoader",
    "MockLoader",
    "DatabaseManager"
]
