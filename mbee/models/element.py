"""
Element models for MBEE.

Elements are the records that make up an engineering model. Only the fields
the tree assembly relies on are declared; everything else is carried as
extra payload.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Element(BaseModel):
    """
    A single model element as produced by a loader or the element store.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(
        ...,
        description="Identifier, unique within a project"
    )

    parent: Optional[str] = Field(
        default=None,
        description="Identifier of the containing package, None for the root"
    )

    type: str = Field(
        default="Block",
        description="Element type; only packages may contain other elements"
    )

    name: str = Field(
        default="",
        description="Display name"
    )

    documentation: str = Field(
        default="",
        description="Free-form documentation text"
    )
