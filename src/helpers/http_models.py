"""Type definitions for JSON documents and HTTP responses."""

from typing import Any, TypeAlias


# JSON value type - using Any for the recursive case
# since pyright has trouble with recursive type aliases
JsonValue: TypeAlias = str | int | float | bool | dict[str, Any] | list[Any] | None

JsonObject: TypeAlias = dict[str, Any]

JsonArray: TypeAlias = list[Any]

__all__ = ["JsonArray", "JsonObject", "JsonValue"]
