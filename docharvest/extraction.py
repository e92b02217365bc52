"""Extraction engine: walk an HtmlExtractionModel over a parsed document.

Each field selects nodes with its query, then either applies its extractor
or recurses into a nested model. Fields are independent; the first failing
field aborts the whole call.
"""

import inspect
import logging
from typing import Any, Callable

from docharvest.fields import FieldDescriptor, HtmlExtractionModel, Record
from docharvest.query import CompiledQuery, parse_html, select

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """An extractor raised while reading a field."""

    def __init__(self, field: str, cause: BaseException):
        self.field = field
        self.cause = cause
        super().__init__(f"Extraction of field {field!r} failed: {cause}")


async def extract_model(document: Any, model: HtmlExtractionModel) -> Record:
    """Extract every field of `model` from `document` (an lxml element)."""
    record: Record = {}
    for name, descriptor in model.items():
        record[name] = await _extract_field(document, name, descriptor)
    return record


async def _extract_field(document: Any, name: str, descriptor: FieldDescriptor) -> Any:
    nodes = select(document, descriptor.query)
    logger.debug("field %s: %r matched %d node(s)", name, descriptor.query, len(nodes))

    if descriptor.multiple:
        if descriptor.limit is not None:
            nodes = nodes[: descriptor.limit]
        return [await _extract_node(node, name, descriptor) for node in nodes]

    if not nodes:
        return None
    return await _extract_node(nodes[0], name, descriptor)


async def _extract_node(node: Any, name: str, descriptor: FieldDescriptor) -> Any:
    if descriptor.nested is not None:
        try:
            return await extract_model(node, descriptor.nested)
        except ExtractionError as e:
            raise ExtractionError(f"{name}.{e.field}", e.cause) from e.cause
    return await _apply(descriptor.extractor, node, name)


async def _apply(extractor: Callable[[Any], Any], node: Any, name: str) -> Any:
    try:
        value = extractor(node)
        if inspect.isawaitable(value):
            value = await value
    except Exception as e:
        logger.warning("extractor for field %s raised: %s", name, e)
        raise ExtractionError(name, e) from e
    return value


class HtmlParser:
    """A parsed HTML document that models can be extracted from repeatedly."""

    def __init__(self, source: str | bytes):
        self.source = source
        self.document = parse_html(source)

    async def extract_model(self, model: HtmlExtractionModel) -> Record:
        logger.debug("Extracting %d field(s)", len(model))
        return await extract_model(self.document, model)

    async def extract_first(self, query: CompiledQuery, extractor: Callable[[Any], Any]) -> Any:
        """Return the extractor's value for the first match, or None."""
        nodes = select(self.document, query)
        if not nodes:
            return None
        return await _apply(extractor, nodes[0], repr(query))

    async def extract_many(
        self,
        query: CompiledQuery,
        extractor: Callable[[Any], Any],
        limit: int | None = None,
    ) -> list:
        """Return the extractor's values for every match, in document order."""
        nodes = select(self.document, query)
        if limit is not None:
            nodes = nodes[:limit]
        return [await _apply(extractor, node, repr(query)) for node in nodes]
