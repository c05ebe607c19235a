"""
Tree models for MBEE.

This module defines the nested structure (JMI type 3) that flat record lists
are assembled into.
"""

from typing import Any, Dict, List
from pydantic import BaseModel, Field


class TreeNode(BaseModel):
    """
    A record and the records it contains.

    Children are kept in the order they were attached while the tree was
    assembled, which is the input order of the flat list.
    """

    element: Dict[str, Any] = Field(
        ...,
        description="The full record held by this node"
    )

    children: List['TreeNode'] = Field(
        default_factory=list,
        description="Nodes whose parent reference names this node's record"
    )

    def count(self) -> int:
        """Count the nodes in this subtree, including this one."""
        total = 0
        stack = [self]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node.children)
        return total


# Enable forward references for self-referencing model
TreeNode.model_rebuild()
