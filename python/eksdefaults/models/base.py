"""
eksdefaults/models/base.py

Shared pydantic configuration for cluster config records. Field names are
snake_case in Python and camelCase in YAML/JSON documents; keys this package
does not model are kept so a loaded document survives a round trip.
"""

from __future__ import annotations

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ConfigModel(BaseModel):
    """Base for every mutable configuration record."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_document(self) -> Dict[str, Any]:
        """
        Dump this record as a plain document using wire (camelCase) keys.
        Unset optional fields are omitted.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_document(obj: Any, expected_type: Type[T]) -> T:
    """
    Validate a raw document (typically parsed YAML) into `expected_type`.

    Args:
        obj (Any): The parsed document. None (an empty file) is rejected.
        expected_type (Type[T]): The pydantic model or type to validate against.

    Returns:
        T: The validated object.

    Raises:
        ValueError: If the document is empty or fails validation.
    """
    name = getattr(expected_type, "__name__", str(expected_type))
    if obj is None:
        raise ValueError(f"Empty document, expected {name}")
    try:
        return TypeAdapter(expected_type).validate_python(obj)
    except ValidationError as e:
        raise ValueError(f"Validation failed for {name}: {e}") from e


__all__ = ["ConfigModel", "validate_document"]
