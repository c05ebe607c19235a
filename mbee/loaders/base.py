"""
Base loader interface for MBEE.

This module defines the abstract interface that all record sources must implement.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class BaseLoader(ABC):
    """
    Abstract base class for all record loaders.

    Each loader fetches model records from a specific source (a JSON export,
    the element store, sample data) and returns them as JMI type 1 data:
    a flat list of plain records.
    """

    @abstractmethod
    def get_all_records(self) -> List[Dict[str, Any]]:
        """
        Retrieve all records from the data source.

        Returns:
            Flat list of records, in source order
        """
        pass
