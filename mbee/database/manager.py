"""
Database manager for MBEE.

This module stores project elements in DuckDB so they can be fetched back as
JMI type 1 data, in the order they were added.
"""

import duckdb
import json
import logging
from typing import Any, Dict, List, Mapping, Sequence

from ..errors import DuplicateKeyError
from ..jmi import build_index


class DatabaseManager:
    """
    Manages the DuckDB database holding project elements.
    """

    def __init__(self, db_path: str = "mbee.db"):
        """
        Initialize the database manager.

        Args:
            db_path: Path to the DuckDB database file (":memory:" for a throwaway store)
        """
        self.db_path = db_path
        self.connection = None

    def connect(self):
        """Establish connection to the database."""
        self.connection = duckdb.connect(self.db_path)

    def disconnect(self):
        """Close the database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()

    def _require_connection(self):
        if not self.connection:
            raise RuntimeError("Database connection not established")
        return self.connection

    def initialize_database(self):
        """
        Create all necessary tables if they don't exist.
        """
        connection = self._require_connection()

        connection.execute("CREATE SEQUENCE IF NOT EXISTS element_position_seq;")
        connection.execute("""
            CREATE TABLE IF NOT EXISTS elements (
                project_id VARCHAR NOT NULL,
                element_id VARCHAR NOT NULL,
                position BIGINT NOT NULL DEFAULT nextval('element_position_seq'),
                data TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (project_id, element_id)
            )
        """)

    def add_elements(self, project_id: str, records: Sequence[Mapping[str, Any]], key_field: str = "id") -> int:
        """
        Add a batch of elements to a project.

        The batch is indexed first, so a batch with repeated identifiers or
        identifiers already stored for the project is rejected as a whole.

        Args:
            project_id: The project the elements belong to
            records: Flat list of element records
            key_field: Field holding each element's identifier

        Returns:
            Number of elements added

        Raises:
            DuplicateKeyError: If an identifier repeats in the batch or is already stored
        """
        connection = self._require_connection()

        batch = build_index(records, key_field)
        keys = [str(key) for key in batch]
        if not keys:
            return 0

        existing = connection.execute("""
            SELECT element_id FROM elements
            WHERE project_id = ?
        """, [project_id]).fetchall()
        # Identifiers are stored as text, so 1 and "1" collide
        seen = {row[0] for row in existing}
        for key in keys:
            if key in seen:
                raise DuplicateKeyError(key)
            seen.add(key)

        connection.executemany("""
            INSERT INTO elements (project_id, element_id, data)
            VALUES (?, ?, ?)
        """, [[project_id, key, json.dumps(record)] for key, record in zip(keys, batch.values())])

        logging.info(f"Added {len(keys)} elements to project {project_id}")
        return len(keys)

    def get_elements(self, project_id: str) -> List[Dict[str, Any]]:
        """
        Get every element of a project.

        Args:
            project_id: The project to read

        Returns:
            Element records in the order they were added
        """
        connection = self._require_connection()

        results = connection.execute("""
            SELECT data FROM elements
            WHERE project_id = ?
            ORDER BY position
        """, [project_id]).fetchall()

        return [json.loads(row[0]) for row in results]

    def count_elements(self, project_id: str) -> int:
        """Count the elements stored for a project."""
        connection = self._require_connection()

        result = connection.execute("""
            SELECT COUNT(*) FROM elements WHERE project_id = ?
        """, [project_id]).fetchone()
        return result[0] if result else 0

    def delete_project(self, project_id: str) -> int:
        """
        Remove every element of a project.

        Returns:
            Number of elements removed
        """
        count = self.count_elements(project_id)
        self._require_connection().execute("""
            DELETE FROM elements WHERE project_id = ?
        """, [project_id])

        logging.info(f"Deleted {count} elements from project {project_id}")
        return count
