"""Result variants returned by the client, and the JSON decoders behind them.

Every façade call returns exactly one of :class:`Success`,
:class:`EmptySuccess`, :class:`NotModified` or :class:`Failure`. The first
three carry a decoded payload whose representation is chosen once, through
:class:`ResultShape`:

- ``ResultShape.STRUCTURED`` decodes JSON objects to
  :class:`types.SimpleNamespace` (attribute access, ``rec.Name``).
- ``ResultShape.MAPPING`` decodes JSON objects to
  :class:`collections.OrderedDict` at every nesting level (``rec["Name"]``).
"""

from __future__ import annotations

import json
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from types import SimpleNamespace
from typing import Any, Callable, Union

from .exceptions import SalesforceError, ValidationError

NOT_MODIFIED_MESSAGE = "The requested object has not changed since the specified time"


class ResultShape(str, Enum):
    STRUCTURED = "structured"
    MAPPING = "mapping"

    @classmethod
    def parse(cls, value: Union[str, "ResultShape"]) -> "ResultShape":
        """Accept an enum member, its value, or the legacy ``object``/``array_a`` names."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliases = {"object": cls.STRUCTURED, "array_a": cls.MAPPING}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ValidationError(f"Unknown result shape: {value!r}") from None


Decoder = Callable[[str], Any]


def _to_namespace(obj: dict) -> SimpleNamespace:
    return SimpleNamespace(**obj)


def decoder_for(shape: ResultShape) -> Decoder:
    """Return a ``str -> object`` JSON decoder producing the requested shape."""
    if shape is ResultShape.MAPPING:
        return lambda text: json.loads(text, object_pairs_hook=OrderedDict)
    return lambda text: json.loads(text, object_hook=_to_namespace)


# ----------------------------------------------------------------------
# Variants
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Success:
    payload: Any

    ok = True

    def unwrap(self) -> Any:
        return self.payload


@dataclass(frozen=True)
class EmptySuccess:
    """2xx/300 with no body. ``payload`` is ``{"success": true}`` in the configured shape."""

    payload: Any

    ok = True

    def unwrap(self) -> Any:
        return self.payload


@dataclass(frozen=True)
class NotModified:
    """304 with no body."""

    message: str
    payload: Any

    ok = True

    def unwrap(self) -> Any:
        return self.payload


@dataclass(frozen=True)
class Failure:
    error: SalesforceError

    ok = False

    @property
    def payload(self) -> None:
        return None

    def unwrap(self) -> Any:
        raise self.error


ApiResult = Union[Success, EmptySuccess, NotModified, Failure]
