"""
JMI type conversions for MBEE.

JMI (JSON Model Interchange) names three shapes of the same record collection:

- type 1: a flat list of records
- type 2: a mapping from a key field to the record
- type 3: a nested tree following each record's parent reference

Conversions are pure: every call builds its own working structures and
either returns a complete result or raises, never a partial one.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, Iterable, List, Set

from ..errors import (
    CircularReferenceError,
    ConversionNotImplementedError,
    DataFormatError,
    DuplicateKeyError,
)
from ..models import TreeNode
from .fields import get_field, is_unset


ROOT_POLICIES = ("error", "first", "last")


def ensure_jmi_type1(data: Any) -> None:
    """
    Ensure data is a flat list of records.

    Raises:
        DataFormatError: If data is not a sequence (strings and mappings are rejected)
    """
    if isinstance(data, (str, bytes, bytearray, Mapping)) or not isinstance(data, Sequence):
        raise DataFormatError("Data is not in JMI type 1.", level="warn")


def build_index(records: Sequence[Mapping[str, Any]], key_field: str = "id") -> Dict[Any, Mapping[str, Any]]:
    """
    Convert JMI type 1 data to JMI type 2.

    Args:
        records: Flat list of records
        key_field: Field path whose value keys the mapping

    Returns:
        Mapping from each record's key to the record itself

    Raises:
        DataFormatError: If records is not a list, or a record has no usable key
        DuplicateKeyError: If two records share a key
    """
    ensure_jmi_type1(records)

    index: Dict[Any, Mapping[str, Any]] = {}
    for record in records:
        key = get_field(record, key_field)
        if is_unset(key):
            raise DataFormatError(f"Record has no value for the key field [{key_field}].", level="warn")

        try:
            seen = key in index
        except TypeError:
            raise DataFormatError(f"Key [{key!r}] in field [{key_field}] cannot be used as a key.", level="warn") from None

        if seen:
            raise DuplicateKeyError(key)
        index[key] = record

    return index


class TreeAssembly:
    """
    Working state for assembling one tree from a flat list.

    Records live in an arena (the index) and each key owns a list of child
    keys. Nothing here is shared between calls.
    """

    def __init__(self, records: Sequence[Mapping[str, Any]], key_field: str = "id", parent_field: str = "parent"):
        self.key_field = key_field
        self.parent_field = parent_field
        self.index = build_index(records, key_field)
        self.children: Dict[Any, List[Any]] = {key: [] for key in self.index}
        self.parents: Dict[Any, Any] = {}
        self.roots: List[Any] = []
        self.detached: List[Any] = []
        self.unresolved: List[tuple] = []

    def link(self) -> None:
        """
        Attach every record to its parent's child list, in input order.
        """
        for key, record in self.index.items():
            parent_key = get_field(record, self.parent_field, None)

            if is_unset(parent_key):
                self.roots.append(key)
                continue

            try:
                known = parent_key in self.index
            except TypeError:
                raise DataFormatError(
                    f"Parent reference [{parent_key!r}] of record [{key}] is not an identifier.", level="warn"
                ) from None

            if not known:
                self.unresolved.append((key, parent_key))
            else:
                self.parents[key] = parent_key
                self.children[parent_key].append(key)

    def validate(self) -> None:
        """
        Check that every record hangs off a root.

        Raises:
            DataFormatError: If there are no records at all
            CircularReferenceError: On dangling parents, a missing root, or
                records that are unreachable from every root
        """
        if not self.index:
            raise DataFormatError("No records to assemble into a tree.", level="warn")

        if self.unresolved:
            missing = ", ".join(f"{parent} (parent of {key})" for key, parent in self.unresolved)
            raise CircularReferenceError(f"Parent references could not be resolved: [{missing}].", level="warn")

        if not self.roots:
            raise CircularReferenceError("No root record found; every record references a parent.", level="warn")

        reached = self.reachable(self.roots)
        leftover = [key for key in self.index if key not in reached]
        if leftover:
            names = ", ".join(str(key) for key in leftover)
            raise CircularReferenceError(
                f"Circular references found; records never reach a root: [{names}].", level="warn"
            )

    def detach(self, accept_parent: Callable[[Any, Any], bool]) -> None:
        """
        Cut the parent links a check refuses, in input order.

        Runs after validate, so cycles are found on the full parent graph
        before any link is cut.

        Args:
            accept_parent: Called with (key, parent_key); when it returns False
                the record and its subtree are left out of the tree
        """
        for key, parent_key in self.parents.items():
            if not accept_parent(key, parent_key):
                self.children[parent_key].remove(key)
                self.detached.append(key)

    def reachable(self, starts: Iterable[Any]) -> Set[Any]:
        """Collect every key reachable from the given keys."""
        seen: Set[Any] = set()
        stack = list(starts)
        while stack:
            key = stack.pop()
            if key in seen:
                continue
            seen.add(key)
            stack.extend(self.children[key])
        return seen

    def select_root(self, root_policy: str) -> Any:
        """Pick the root to return according to the multiple-roots policy."""
        if len(self.roots) == 1:
            return self.roots[0]

        names = ", ".join(str(key) for key in self.roots)
        if root_policy == "error":
            raise DataFormatError(f"Expected a single root, found {len(self.roots)}: [{names}].", level="warn")

        chosen = self.roots[0] if root_policy == "first" else self.roots[-1]
        logging.warning(f"Found {len(self.roots)} roots [{names}]; keeping [{chosen}] ({root_policy} root wins)")
        return chosen

    def materialize(self, root_key: Any) -> TreeNode:
        """Build TreeNode objects for the subtree under root_key."""
        root = TreeNode(element=self.index[root_key])
        stack = [(root_key, root)]
        while stack:
            key, node = stack.pop()
            for child_key in self.children[key]:
                child = TreeNode(element=self.index[child_key])
                node.children.append(child)
                stack.append((child_key, child))
        return root


def check_root_policy(root_policy: str) -> None:
    if root_policy not in ROOT_POLICIES:
        raise DataFormatError(
            f"Unknown root policy [{root_policy}]; expected one of {', '.join(ROOT_POLICIES)}.", level="warn"
        )


def build_tree(records: Sequence[Mapping[str, Any]], parent_field: str = "parent",
               key_field: str = "id", root_policy: str = "error") -> TreeNode:
    """
    Convert JMI type 1 data to JMI type 3.

    Args:
        records: Flat list of records, in any order
        parent_field: Field path holding the parent's key
        key_field: Field path holding each record's key
        root_policy: What to do with several parentless records:
            "error", "first" or "last"

    Returns:
        The root node; every record appears exactly once below it

    Raises:
        DataFormatError: On malformed input or several roots under the "error" policy
        DuplicateKeyError: If two records share a key
        CircularReferenceError: If a parent chain never reaches a root
    """
    check_root_policy(root_policy)

    assembly = TreeAssembly(records, key_field, parent_field)
    assembly.link()
    assembly.validate()
    return assembly.materialize(assembly.select_root(root_policy))


def build_forest(records: Sequence[Mapping[str, Any]], parent_field: str = "parent",
                 key_field: str = "id") -> List[TreeNode]:
    """
    Convert JMI type 1 data to a list of JMI type 3 trees, one per root.

    Roots are returned in input order. Errors are the same as build_tree,
    except that several roots are allowed.
    """
    assembly = TreeAssembly(records, key_field, parent_field)
    assembly.link()
    assembly.validate()
    return [assembly.materialize(key) for key in assembly.roots]


def convert_jmi(from_version: int, to_version: int, data: Any, field: str = "id",
                parent_field: str = "parent") -> Any:
    """
    Convert data between JMI types.

    Args:
        from_version: The current JMI type of the data
        to_version: The JMI type to convert to
        data: The data to convert
        field: The field the records are keyed on
        parent_field: The field holding parent references (type 3 only)

    Returns:
        The converted data

    Raises:
        ConversionNotImplementedError: If the pair of types is not supported
        DataFormatError: If type 1 data is not a list
    """
    if from_version == 1 and to_version == 2:
        return build_index(data, field)
    if from_version == 1 and to_version == 3:
        ensure_jmi_type1(data)
        return build_tree(data, parent_field, field)

    raise ConversionNotImplementedError(
        f"JMI conversion from type {from_version} to type {to_version} is not implemented.", level="warn"
    )
