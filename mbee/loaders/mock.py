"""
Mock loader for testing MBEE.

This module provides a small hard-coded model used to exercise conversions
and the command line without a real export.
"""

from typing import Any, Dict, List

from ..models import Element
from .base import BaseLoader


class MockLoader(BaseLoader):
    """
    Mock loader that returns a sample engineering model.

    The records are deliberately listed with some children before their
    parents, as a database query would return them.
    """

    def __init__(self):
        """Initialize the mock loader with sample data."""
        self._elements = self._create_sample_elements()

    def get_all_records(self) -> List[Dict[str, Any]]:
        """
        Return the sample elements as plain records.

        Returns:
            A new list of records on every call
        """
        return [element.model_dump() for element in self._elements]

    def _create_sample_elements(self) -> List[Element]:
        """
        Create the sample model.

        Returns:
            Elements of a small vehicle model
        """
        return [
            Element(id="model", type="Package", name="Model"),
            Element(id="engine", parent="structure", type="Block", name="Engine",
                    documentation="Combustion engine assembly."),
            Element(id="structure", parent="model", type="Package", name="Structure"),
            Element(id="chassis", parent="structure", type="Block", name="Chassis"),
            Element(id="requirements", parent="model", type="Package", name="Requirements"),
            Element(id="req-range", parent="requirements", type="Requirement", name="Range",
                    documentation="The vehicle shall travel 500 km on a full tank."),
            Element(id="req-mass", parent="requirements", type="Requirement", name="Mass",
                    documentation="The vehicle shall weigh less than 1500 kg."),
            Element(id="satisfies-range", parent="model", type="Relationship", name="satisfies",
                    source="engine", target="req-range"),
        ]
