"""
Element tree assembly and ordering.

Elements form a containment tree in which only packages may hold other
elements. Sorting a project's elements means building that tree and reading
it back depth-first, so that every package comes before its contents and
siblings stay together.
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Sequence

from ..errors import DataFormatError
from ..models import TreeNode
from .conversions import TreeAssembly, check_root_policy
from .fields import get_field, is_unset


def create_elements_tree(records: Sequence[Mapping[str, Any]], key_field: str = "id",
                         parent_field: str = "parent", type_field: str = "type",
                         package_type: str = "package", root_policy: str = "error",
                         allow_non_package_parents: bool = False) -> TreeNode:
    """
    Build the containment tree of a list of elements.

    Args:
        records: Flat list of elements, in any order
        key_field: Field path holding each element's identifier
        parent_field: Field path holding the containing element's identifier
        type_field: Field path holding the element type
        package_type: Type name (case-insensitive) allowed to contain elements
        root_policy: What to do with several parentless elements:
            "error", "first" or "last"
        allow_non_package_parents: Detach elements whose parent is not a
            package, with a warning, instead of failing

    Returns:
        The root node of the tree

    Raises:
        DataFormatError: On malformed input, an element without a type, an
            element contained by a non-package (unless allowed), or several roots
        DuplicateKeyError: If two elements share an identifier
        CircularReferenceError: If a parent chain never reaches the root
    """
    check_root_policy(root_policy)

    assembly = TreeAssembly(records, key_field, parent_field)
    package = package_type.lower()
    types: Dict[Any, str] = {}
    for key, record in assembly.index.items():
        element_type = get_field(record, type_field)
        if is_unset(element_type) or not isinstance(element_type, str):
            raise DataFormatError(f"Element [{key}] has no type in the field [{type_field}].", level="warn")
        types[key] = element_type.lower()

    def accept_parent(key: Any, parent_key: Any) -> bool:
        if types[parent_key] == package:
            return True
        if allow_non_package_parents:
            logging.warning(f"Element [{key}] is contained by non-package [{parent_key}]; detaching it from the tree")
            return False
        raise DataFormatError(
            f"Element [{key}] names [{parent_key}] as its parent, but [{parent_key}] is not a {package_type}.",
            level="warn",
        )

    assembly.link()
    assembly.validate()
    assembly.detach(accept_parent)
    return assembly.materialize(assembly.select_root(root_policy))


def iter_preorder(tree: TreeNode) -> Iterator[Dict[str, Any]]:
    """
    Yield the records of a tree depth-first, each node before its children.

    Each call returns a fresh iterator, so a tree can be walked any number of times.
    """
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node.element
        stack.extend(reversed(node.children))


def flatten(tree: TreeNode) -> List[Dict[str, Any]]:
    """Get the records of a tree as a list, in depth-first pre-order."""
    return list(iter_preorder(tree))


def sort_elements_array(records: Sequence[Mapping[str, Any]], **options: Any) -> List[Dict[str, Any]]:
    """
    Order elements so packages precede their contents.

    Accepts the same keyword options as create_elements_tree.
    """
    return flatten(create_elements_tree(records, **options))
