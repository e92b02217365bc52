"""Field models consumed by the extraction and transformation engines.

Both models are read-only mappings keyed by output field name, built once
and reused across many documents or records.
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, PositiveInt, field_validator, model_validator

from docharvest.query import CompiledQuery

Record = dict[str, Any]


class HtmlExtractionModel(Mapping):
    """Mapping of output field name to FieldDescriptor.

    Descriptors may be given as FieldDescriptor instances or plain dicts
    with the same keys (`query`, `extractor`, `multiple`, `limit`, `nested`).
    """

    def __init__(self, fields: Mapping[str, Any]):
        self._fields: dict[str, FieldDescriptor] = {}
        for name, descriptor in fields.items():
            if not isinstance(name, str) or not name:
                raise ValueError(f"Field names must be non-empty strings, got {name!r}")
            if not isinstance(descriptor, FieldDescriptor):
                descriptor = FieldDescriptor.model_validate(descriptor)
            self._fields[name] = descriptor

    def __getitem__(self, name: str) -> "FieldDescriptor":
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"HtmlExtractionModel({self._fields!r})"


class FieldDescriptor(BaseModel):
    """How to obtain one field: a query plus an extractor or a nested model."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    query: CompiledQuery
    extractor: Callable[[Any], Any] | None = None
    multiple: bool = False
    limit: PositiveInt | None = None
    nested: HtmlExtractionModel | None = None

    @field_validator("nested", mode="before")
    @classmethod
    def _wrap_nested(cls, value: Any) -> Any:
        if isinstance(value, Mapping) and not isinstance(value, HtmlExtractionModel):
            return HtmlExtractionModel(value)
        return value

    @model_validator(mode="after")
    def _check_source(self) -> "FieldDescriptor":
        if self.extractor is None and self.nested is None:
            raise ValueError("a field needs either an extractor or a nested model")
        if self.limit is not None and not self.multiple:
            raise ValueError("limit only applies to fields with multiple=True")
        return self


class TransformStep(BaseModel):
    """One step of a field's transform chain.

    `key` names the raw-record field the chain reads. It is None only until
    the step is placed in a TransformingModel.
    """

    model_config = ConfigDict(frozen=True)

    key: str | None = None
    transformer: Callable[[Any], Any]


def transform(*, transformer: Callable[[Any], Any], key: str | None = None) -> TransformStep:
    """Build a transform step; `key` defaults to the destination field."""
    return TransformStep(key=key, transformer=transformer)


class TransformingModel(Mapping):
    """Mapping of destination field name to an ordered tuple of TransformSteps.

    Source keys are resolved here: a step without a key reads the destination
    field. Every step of a chain reads the same source key.
    """

    def __init__(self, fields: Mapping[str, Sequence[Any]]):
        self._chains: dict[str, tuple[TransformStep, ...]] = {}
        self._sources: dict[str, str] = {}
        for name, steps in fields.items():
            if not isinstance(name, str) or not name:
                raise ValueError(f"Field names must be non-empty strings, got {name!r}")
            if isinstance(steps, (str, bytes)) or not isinstance(steps, Sequence):
                raise ValueError(f"Field {name!r}: expected a list of transform steps")

            steps = [s if isinstance(s, TransformStep) else TransformStep(transformer=s) for s in steps]
            keys = {s.key for s in steps if s.key is not None}
            if len(keys) > 1:
                raise ValueError(f"Field {name!r}: steps read different source keys {sorted(keys)}")

            source = keys.pop() if keys else name
            self._sources[name] = source
            self._chains[name] = tuple(s.model_copy(update={"key": source}) for s in steps)

    def source_key(self, name: str) -> str:
        return self._sources[name]

    def __getitem__(self, name: str) -> tuple[TransformStep, ...]:
        return self._chains[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chains)

    def __len__(self) -> int:
        return len(self._chains)

    def __repr__(self) -> str:
        return f"TransformingModel({self._chains!r})"
