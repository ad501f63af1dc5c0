"""
Validation utilities shared by schemas, routers and services.
Provides identifier parsing, email checks, list-field parsing and form helpers.
"""

import json
import re
import uuid
from typing import Any, Dict, List, Optional
from email_validator import validate_email, EmailNotValidError

from realty_api.utils.exceptions import InvalidIdError, InvalidIndexError


class ValidationUtils:
    """
    Utility class for common validation operations.
    Provides reusable validation methods for the request values the API accepts.
    """

    # Word characters with single dot/dash separators, then a 2-3 letter TLD
    EMAIL_PATTERN = re.compile(r'^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*(?:\.\w{2,3})+$')

    @staticmethod
    def parse_record_id(value: Any, resource: str) -> uuid.UUID:
        """
        Parse a path identifier into a UUID.

        Raises:
            InvalidIdError: If the identifier is malformed
        """
        try:
            return uuid.UUID(str(value).strip())
        except (ValueError, AttributeError, TypeError):
            raise InvalidIdError(resource)

    @staticmethod
    def parse_image_index(value: Any, length: int) -> int:
        """
        Parse an image index and check it against the current list length.

        Raises:
            InvalidIndexError: If the index is not an integer or is out of range
        """
        try:
            index = int(str(value).strip())
        except (ValueError, TypeError):
            raise InvalidIndexError()

        if index < 0 or index >= length:
            raise InvalidIndexError()
        return index

    @staticmethod
    def parse_positive_int(value: Any, default: int) -> int:
        """Parse a positive integer, returning `default` for anything else."""
        try:
            number = int(str(value).strip())
        except (ValueError, TypeError):
            return default
        return number if number >= 1 else default

    @classmethod
    def is_valid_email(cls, email: str) -> bool:
        """
        Check an email with email-validator, then against the stricter address pattern
        (2-3 letter top-level domains, no quoted local parts).
        """
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            return False
        return bool(cls.EMAIL_PATTERN.match(email))

    @staticmethod
    def parse_string_list_strict(value: Any, field_name: str) -> List[str]:
        """
        Parse a serialized JSON array of strings.

        Raises:
            ValueError: If the value is not a JSON array
        """
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]

        try:
            parsed = json.loads(value)
        except (TypeError, ValueError):
            raise ValueError(f"{field_name} must be a JSON array")

        if not isinstance(parsed, list):
            raise ValueError(f"{field_name} must be a JSON array")
        return [str(item) for item in parsed]

    @staticmethod
    def parse_string_list_lenient(value: Any) -> List[str]:
        """
        Parse a list field that may arrive serialized or as a plain string.
        Anything that does not decode to a JSON array becomes a one-element list.
        """
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]

        raw = str(value)
        try:
            parsed = json.loads(raw)
        except ValueError:
            return [raw]

        if isinstance(parsed, list):
            return [str(item) for item in parsed]
        return [raw]

    @staticmethod
    def parse_featured_flag(value: Any) -> bool:
        """Only an explicit true marks a property as featured."""
        return value is True or value == "true"


def compact(**fields: Any) -> Dict[str, Any]:
    """Drop form fields that were not sent or were sent empty."""
    return {key: value for key, value in fields.items() if value is not None and value != ""}


def single_or_list(values: Optional[List[str]]) -> Any:
    """
    Collapse a repeated form field.
    A single value is passed on as the raw string so serialized lists can be decoded.
    """
    if values is None:
        return None
    if len(values) == 1:
        return values[0]
    return values

