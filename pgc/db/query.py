from typing import Any


def build_query(field: str, value: Any) -> dict[str, Any]:
    """Build an equality filter matching documents where ``field == value``."""
    if not field:
        raise ValueError("Query field must not be empty")
    return {field: value}
