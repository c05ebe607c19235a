"""JMI conversions and element tree ordering."""

from .fields import get_field
from .conversions import build_index, build_tree, build_forest, convert_jmi
from .element_sort import create_elements_tree, iter_preorder, flatten, sort_elements_array

__all__ = [
    "get_field",
    "build_index",
    "build_tree",
    "build_forest",
    "convert_jmi",
    "create_elements_tree",
    "iter_preorder",
    "flatten",
    "sort_elements_array"
]
