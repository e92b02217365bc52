"""Pydantic request/response models for the HTTP API.

Models arrive as JSON, so selectors, properties and converters are named by
string and compiled into HtmlExtractionModel / TransformingModel here.
"""

from typing import Any

from pydantic import BaseModel, PositiveInt, model_validator

from docharvest.fields import HtmlExtractionModel, TransformingModel, transform
from docharvest.query import css, extract, xpath
from docharvest.transformers import get_transformer


class FieldSpec(BaseModel):
    css: str | None = None
    xpath: str | None = None
    extract: str = "innerText"
    multiple: bool = False
    limit: PositiveInt | None = None
    nested: dict[str, "FieldSpec"] | None = None

    @model_validator(mode="after")
    def _one_query(self) -> "FieldSpec":
        if (self.css is None) == (self.xpath is None):
            raise ValueError("exactly one of 'css' or 'xpath' is required")
        return self


class StepSpec(BaseModel):
    name: str
    key: str | None = None
    args: list[Any] = []


class ExtractRequest(BaseModel):
    html: str
    fields: dict[str, FieldSpec]
    transforms: dict[str, list[StepSpec]] = {}


class ExtractResponse(BaseModel):
    data: dict[str, Any]
    processing_time_ms: int


def build_extraction_model(fields: dict[str, FieldSpec]) -> HtmlExtractionModel:
    """Compile field specs. Raises QueryError for bad selectors."""
    model = {}
    for name, spec in fields.items():
        query = css(spec.css) if spec.css is not None else xpath(spec.xpath)
        descriptor: dict[str, Any] = {"query": query, "multiple": spec.multiple, "limit": spec.limit}
        if spec.nested is not None:
            descriptor["nested"] = build_extraction_model(spec.nested)
        else:
            descriptor["extractor"] = extract(spec.extract)
        model[name] = descriptor
    return HtmlExtractionModel(model)


def build_transforming_model(transforms: dict[str, list[StepSpec]]) -> TransformingModel:
    """Resolve named converters. Raises ValueError for unknown names or mixed keys."""
    return TransformingModel({
        name: [transform(key=step.key, transformer=get_transformer(step.name, *step.args)) for step in steps]
        for name, steps in transforms.items()
    })
