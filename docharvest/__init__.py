"""docharvest: declarative HTML field extraction and record transformation.

Typical use:

    model = HtmlExtractionModel({"name": {"query": css("#title"), "extractor": extract("innerText")}})
    raw = await HtmlParser(html).extract_model(model)
    clean = await Transformer(raw).transform(
        TransformingModel({"name": [transform(transformer=StringTransformer.trim)]})
    )
"""

__version__ = "1.0.0"

from docharvest.extraction import ExtractionError, HtmlParser, extract_model
from docharvest.fields import (
    FieldDescriptor,
    HtmlExtractionModel,
    Record,
    TransformingModel,
    TransformStep,
    transform,
)
from docharvest.query import CompiledQuery, QueryError, css, extract, parse_html, read_property, select, xpath
from docharvest.transformation import TransformError, Transformer
from docharvest.transformers import StringTransformer, get_transformer

__all__ = [
    "CompiledQuery",
    "ExtractionError",
    "FieldDescriptor",
    "HtmlExtractionModel",
    "HtmlParser",
    "QueryError",
    "Record",
    "StringTransformer",
    "TransformError",
    "TransformStep",
    "Transformer",
    "TransformingModel",
    "css",
    "extract",
    "extract_model",
    "get_transformer",
    "parse_html",
    "read_property",
    "select",
    "transform",
    "xpath",
]
