"""Field paths and field-level validation errors."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable


class ErrorType(enum.Enum):
    """Kinds of field validation errors."""

    NOT_FOUND = "FieldValueNotFound"
    REQUIRED = "FieldValueRequired"
    DUPLICATE = "FieldValueDuplicate"
    INVALID = "FieldValueInvalid"
    NOT_SUPPORTED = "FieldValueNotSupported"
    FORBIDDEN = "FieldValueForbidden"
    TOO_LONG = "FieldValueTooLong"
    TOO_MANY = "FieldValueTooMany"
    INTERNAL = "InternalError"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ErrorType.NOT_FOUND: "Not found",
    ErrorType.REQUIRED: "Required value",
    ErrorType.DUPLICATE: "Duplicate value",
    ErrorType.INVALID: "Invalid value",
    ErrorType.NOT_SUPPORTED: "Unsupported value",
    ErrorType.FORBIDDEN: "Forbidden",
    ErrorType.TOO_LONG: "Too long",
    ErrorType.TOO_MANY: "Too many",
    ErrorType.INTERNAL: "Internal error",
}

_VALUELESS = {ErrorType.REQUIRED, ErrorType.FORBIDDEN, ErrorType.TOO_LONG, ErrorType.INTERNAL}


class FieldPath:
    """An immutable path to a field, such as ``spec.workers[0].zones``.

    ``FieldPath()`` with no names is the empty path and renders as ``<nil>``;
    children of it start a fresh path.
    """

    __slots__ = ("_segments",)

    def __init__(self, *names: str) -> None:
        self._segments: tuple[tuple[str, bool], ...] = tuple((name, False) for name in names)

    @classmethod
    def _with(cls, segments: tuple[tuple[str, bool], ...]) -> "FieldPath":
        path = cls.__new__(cls)
        path._segments = segments
        return path

    def child(self, name: str, *more: str) -> "FieldPath":
        """Return the path extended by one or more field names."""
        return self._with(self._segments + tuple((n, False) for n in (name, *more)))

    def index(self, i: int) -> "FieldPath":
        """Return the path extended by a list index."""
        return self._with(self._segments + ((str(i), True),))

    def __str__(self) -> str:
        if not self._segments:
            return "<nil>"
        parts = []
        for position, (text, is_index) in enumerate(self._segments):
            if is_index or not text:
                parts.append(f"[{text}]")
            elif position > 0:
                parts.append(f".{text}")
            else:
                parts.append(text)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"FieldPath({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldPath):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)


def _path_text(path: FieldPath | None) -> str:
    return "<nil>" if path is None else str(path)


@dataclass(frozen=True)
class FieldError:
    """A single validation problem found at a field."""

    type: ErrorType
    field: str
    bad_value: Any
    detail: str

    def __str__(self) -> str:
        body = self.type.description
        if self.type not in _VALUELESS:
            body = f"{body}: {self.bad_value!r}"
        if self.detail:
            body = f"{body}: {self.detail}"
        return f"{self.field}: {body}"


def required(path: FieldPath | None, detail: str) -> FieldError:
    return FieldError(ErrorType.REQUIRED, _path_text(path), "", detail)


def invalid(path: FieldPath | None, value: Any, detail: str) -> FieldError:
    return FieldError(ErrorType.INVALID, _path_text(path), value, detail)


def forbidden(path: FieldPath | None, detail: str) -> FieldError:
    return FieldError(ErrorType.FORBIDDEN, _path_text(path), "", detail)


def not_supported(path: FieldPath | None, value: Any, valid_values: Iterable[str] | None) -> FieldError:
    values = list(valid_values or [])
    detail = ""
    if values:
        detail = "supported values: " + ", ".join(f'"{v}"' for v in values)
    return FieldError(ErrorType.NOT_SUPPORTED, _path_text(path), value, detail)


def too_many(path: FieldPath | None, actual: int, limit: int) -> FieldError:
    return FieldError(ErrorType.TOO_MANY, _path_text(path), actual, f"must have at most {limit} items")


def _semantic_equal(a: Any, b: Any) -> bool:
    empty = (list, tuple, dict, set)
    if a is None and isinstance(b, empty) and not b:
        return True
    if b is None and isinstance(a, empty) and not a:
        return True
    return a == b


def validate_immutable_field(new: Any, old: Any, path: FieldPath | None) -> list[FieldError]:
    """Report an error if ``new`` differs from ``old``; empty and absent collections are equal."""
    if _semantic_equal(new, old):
        return []
    return [invalid(path, new, "field is immutable")]