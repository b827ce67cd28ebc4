"""Identity resolver: validates externally supplied entity ids before they reach a pipeline"""
import re
from typing import Any, Optional

from core.errors import InvalidIdentifier

ID_LENGTH = 24
_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_ID_PATTERN.match(value.strip()))


def resolve_id(value: Any, field: str = "id") -> str:
    """
    Validate and normalize an entity id.

    Args:
        value: Raw value from the request (path, query, header)
        field: Name used in the error message

    Returns:
        str: Lowercase 24-hex id

    Raises:
        InvalidIdentifier: value is missing, wrong length or not hex
    """
    if not is_valid_id(value):
        raise InvalidIdentifier(f"{field} must be a {ID_LENGTH}-character hex string")
    return value.strip().lower()


def resolve_optional_id(value: Any, field: str = "id") -> Optional[str]:
    """Like resolve_id, but None or blank means 'absent' (e.g. anonymous viewer)"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return resolve_id(value, field)
