"""
JSON file loader for MBEE.

Reads JMI type 1 data from a JSON export. The file holds either the list of
records itself or an object with the list under a collection key.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from ..errors import DataFormatError
from ..jmi.conversions import ensure_jmi_type1
from .base import BaseLoader


class JSONFileLoader(BaseLoader):
    """
    Loader for JSON exports of model records.
    """

    def __init__(self, file_path: str, collection_key: str = "elements"):
        """
        Initialize the JSON file loader.

        Args:
            file_path: Path to the JSON file
            collection_key: Key holding the record list when the file contains an object
        """
        self.file_path = Path(file_path)
        self.collection_key = collection_key

        logging.info(f"Initialized JSON file loader for: {self.file_path}")

    def get_all_records(self) -> List[Dict[str, Any]]:
        """
        Read every record from the file.

        Raises:
            FileNotFoundError: If the file does not exist
            DataFormatError: If the file is not valid JSON or holds no record list
        """
        if not self.file_path.is_file():
            raise FileNotFoundError(f"JSON file not found: {self.file_path}")

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DataFormatError(f"File {self.file_path} is not valid JSON: {e}", level="warn") from e

        if isinstance(data, dict):
            if self.collection_key not in data:
                raise DataFormatError(
                    f"File {self.file_path} has no [{self.collection_key}] list.", level="warn"
                )
            data = data[self.collection_key]

        ensure_jmi_type1(data)
        logging.info(f"Loaded {len(data)} records from {self.file_path}")
        return list(data)
