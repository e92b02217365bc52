"""Transformation engine: run per-field step chains over a raw record.

The cleaned record starts as a shallow copy of the raw record, so fields
without a chain pass through unchanged. Each chain reads its source key and
feeds every step's (awaited) output into the next step.
"""

import asyncio
import inspect
import logging
from typing import Any

from docharvest.config import settings
from docharvest.fields import Record, TransformingModel

logger = logging.getLogger(__name__)


class TransformError(Exception):
    """A transform step raised or its awaitable result failed."""

    def __init__(self, field: str, step_index: int, cause: BaseException):
        self.field = field
        self.step_index = step_index
        self.cause = cause
        super().__init__(f"Transform of field {field!r} failed at step {step_index}: {cause}")


class Transformer:
    """Applies TransformingModels to one raw record."""

    def __init__(self, record: Record, concurrent: bool | None = None):
        self.record = dict(record)
        self.concurrent = settings.TRANSFORM_CONCURRENT_FIELDS if concurrent is None else concurrent

    async def transform(self, model: TransformingModel) -> Record:
        """Return a new cleaned record. Raises TransformError on the first failing step."""
        fields = list(model)
        if self.concurrent:
            values = await self._run_concurrently(model, fields)
        else:
            values = [await self._run_chain(model, field) for field in fields]

        cleaned = dict(self.record)
        cleaned.update(zip(fields, values))
        return cleaned

    async def _run_concurrently(self, model: TransformingModel, fields: list[str]) -> list[Any]:
        tasks = [asyncio.ensure_future(self._run_chain(model, field)) for field in fields]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _run_chain(self, model: TransformingModel, field: str) -> Any:
        value = self.record.get(model.source_key(field))
        for index, step in enumerate(model[field]):
            try:
                value = step.transformer(value)
                if inspect.isawaitable(value):
                    value = await value
            except Exception as e:
                logger.warning("transform of field %s failed at step %d: %s", field, index, e)
                raise TransformError(field, index, e) from e
        return value
