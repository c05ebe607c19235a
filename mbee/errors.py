"""
Error types for MBEE.

Every failure raised by the JMI conversions carries an HTTP-like status, the
reason phrase for that status and a human-readable description, so that the
calling layer can translate it into a response without inspecting messages.
"""

import logging
from http import HTTPStatus
from typing import Any, Dict, Iterable, Mapping, Optional


_LOG_LEVELS = {
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "verbose": logging.DEBUG,
}


class CustomError(Exception):
    """
    Base error carrying a status code, its reason phrase and a description.
    """

    kind = "CustomError"
    default_status = 500

    def __init__(self, description: str, status: Optional[int] = None, level: Optional[str] = None):
        """
        Create the error and optionally log it.

        Args:
            description: Human-readable explanation of the failure
            status: HTTP-like status code (defaults to the class status)
            level: Log level name; when given the description is logged immediately
        """
        super().__init__(description)
        self.description = description
        self.status = status if status is not None else self.default_status
        self.message = self.get_message()

        if level:
            self.log(level)

    def get_message(self) -> str:
        """Get the reason phrase matching the status code."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return HTTPStatus.INTERNAL_SERVER_ERROR.phrase

    def log(self, level: str = "warn") -> None:
        """Log the description at the given level name (unknown names log as errors)."""
        logging.log(_LOG_LEVELS.get(str(level).lower(), logging.ERROR), self.description)

    def body(self) -> Dict[str, Any]:
        """Get the error as a serializable dictionary."""
        return {
            "status": self.status,
            "message": self.message,
            "description": self.description,
        }

    def __str__(self) -> str:
        return f"{self.status} ERROR: {self.description}"


class DataFormatError(CustomError, ValueError):
    """Input is not shaped as expected."""

    kind = "DataFormatError"
    default_status = 400


class DuplicateKeyError(CustomError):
    """Two or more records share the same indexing key."""

    kind = "DuplicateKeyError"
    default_status = 403

    def __init__(self, key: Any, level: Optional[str] = "warn"):
        self.key = key
        super().__init__(f"Invalid object, duplicate keys [{key}] exist.", level=level)


class CircularReferenceError(CustomError):
    """Parent references never terminate at a root, or point outside the input."""

    kind = "CircularReferenceError"
    default_status = 403


class ConversionNotImplementedError(CustomError, NotImplementedError):
    """The requested JMI conversion is not supported."""

    kind = "NotImplementedError"
    default_status = 501


def check_type(params: Mapping[str, Any], expected: type) -> None:
    """
    Ensure every value in params is an instance of the expected type.

    Raises:
        DataFormatError: If any value has a different type
    """
    for name, value in params.items():
        if not isinstance(value, expected):
            raise DataFormatError(f"Value [{name}] is not a [{expected.__name__}].")


def check_exists(paths: Iterable[str], obj: Mapping[str, Any], parent: Optional[str] = None) -> None:
    """
    Ensure each dotted attribute path exists in obj.

    Args:
        paths: Attribute paths such as "name" or "custom.owner"
        obj: The body to check
        parent: Name used in the error message (defaults to "request")

    Raises:
        DataFormatError: If an attribute is missing
    """
    parent_name = parent if parent is not None else "request"
    for path in paths:
        head, _, rest = path.partition(".")
        if not isinstance(obj, Mapping) or head not in obj:
            raise DataFormatError(f"There is no attribute [{path}] in the {parent_name} body.")
        if rest:
            check_exists([rest], obj[head], head)
