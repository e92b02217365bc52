"""Built-in value converters usable as transform steps.

Every converter passes None through and maps lists element-wise, so the
same step works on single and `multiple` fields.
"""

import functools
import re
from datetime import datetime
from typing import Any, Callable
from urllib.parse import urljoin

_WHITESPACE = re.compile(r"\s+")
_NUMBER = re.compile(r"[-+]?\d+(?:\.\d+)?")


def _elementwise(fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
    @functools.wraps(fn)
    def wrapper(value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, list):
            return [wrapper(item) for item in value]
        return fn(value)

    return wrapper


class StringTransformer:
    """Namespace of ready-made converters."""

    @staticmethod
    @_elementwise
    def trim(value: str) -> str:
        return value.strip()

    @staticmethod
    @_elementwise
    def lower(value: str) -> str:
        return value.lower()

    @staticmethod
    @_elementwise
    def upper(value: str) -> str:
        return value.upper()

    @staticmethod
    @_elementwise
    def collapse_whitespace(value: str) -> str:
        """Trim and squeeze internal runs of whitespace to one space."""
        return _WHITESPACE.sub(" ", value).strip()

    @staticmethod
    @_elementwise
    def to_float(value: str) -> float:
        return float(value.strip().replace(",", ""))

    @staticmethod
    @_elementwise
    def to_int(value: str) -> int:
        return int(value.strip().replace(",", ""))

    @staticmethod
    @_elementwise
    def extract_number(value: str) -> float | None:
        """First number in the string ("$1,299.50" -> 1299.5), or None."""
        match = _NUMBER.search(value.replace(",", ""))
        return float(match.group()) if match else None

    @staticmethod
    def resolve_url(base: str) -> Callable[[Any], Any]:
        """Resolve relative URLs against `base`."""
        return _elementwise(lambda value: urljoin(base, value.strip()))

    @staticmethod
    def replace(old: str, new: str) -> Callable[[Any], Any]:
        return _elementwise(lambda value: value.replace(old, new))

    @staticmethod
    def split(separator: str | None = None) -> Callable[[Any], Any]:
        """Split a string into a list of trimmed, non-empty parts."""

        def split_value(value: Any) -> Any:
            if value is None:
                return None
            return [part.strip() for part in value.split(separator) if part.strip()]

        return split_value

    @staticmethod
    def parse_date(fmt: str | None = None) -> Callable[[Any], Any]:
        """Parse with `datetime.strptime(fmt)`, or ISO 8601 when fmt is None."""
        if fmt is None:
            return _elementwise(lambda value: datetime.fromisoformat(value.strip()))
        return _elementwise(lambda value: datetime.strptime(value.strip(), fmt))


# name -> converter, or factory when the converter takes arguments
CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "trim": StringTransformer.trim,
    "lower": StringTransformer.lower,
    "upper": StringTransformer.upper,
    "collapse_whitespace": StringTransformer.collapse_whitespace,
    "to_float": StringTransformer.to_float,
    "to_int": StringTransformer.to_int,
    "extract_number": StringTransformer.extract_number,
}

FACTORIES: dict[str, Callable[..., Callable[[Any], Any]]] = {
    "resolve_url": StringTransformer.resolve_url,
    "replace": StringTransformer.replace,
    "split": StringTransformer.split,
    "parse_date": StringTransformer.parse_date,
}


def get_transformer(name: str, *args: Any) -> Callable[[Any], Any]:
    """Look up a built-in converter by name. Raises ValueError if unknown."""
    if name in CONVERTERS:
        if args:
            raise ValueError(f"Transformer {name!r} takes no arguments")
        return CONVERTERS[name]
    if name in FACTORIES:
        try:
            return FACTORIES[name](*args)
        except TypeError as e:
            raise ValueError(f"Bad arguments for transformer {name!r}: {e}") from e
    raise ValueError(f"Unknown transformer: {name}")
