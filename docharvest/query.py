"""lxml-backed document queries.

Everything the extraction engine knows about the HTML backend goes through
this module: compiling a selector once, selecting nodes with it, and reading
a named property off a node.

Supported properties for `read_property` / `extract`:
- innerText, textContent, text: concatenated text of the subtree
- innerHtml, innerHTML: serialized children
- outerHtml, outerHTML: serialized node
- tagName: upper-case tag name
- anything else: the attribute of that name
"""

import logging
import re
from html import escape
from typing import Any, Callable

import lxml.html
from lxml import etree
from lxml.cssselect import CSSSelector, SelectorError

logger = logging.getLogger(__name__)

TEXT_PROPERTIES = frozenset({"innerText", "textContent", "text"})
INNER_HTML_PROPERTIES = frozenset({"innerHtml", "innerHTML"})
OUTER_HTML_PROPERTIES = frozenset({"outerHtml", "outerHTML"})

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


class QueryError(Exception):
    """A selector could not be compiled or evaluated."""


class CompiledQuery:
    """A selector compiled once and reusable across documents."""

    __slots__ = ("expression", "kind", "_selector")

    def __init__(self, expression: str, kind: str, selector: etree.XPath):
        self.expression = expression
        self.kind = kind
        self._selector = selector

    def __repr__(self) -> str:
        return f"{self.kind}({self.expression!r})"

    def __call__(self, node: Any) -> list:
        return select(node, self)


def css(selector: str) -> CompiledQuery:
    """Compile a CSS selector. Raises QueryError if it is invalid or unsupported."""
    try:
        compiled = CSSSelector(selector, translator="html")
    except SelectorError as e:
        raise QueryError(f"Invalid CSS selector {selector!r}: {e}") from e
    return CompiledQuery(selector, "css", compiled)


def xpath(expression: str) -> CompiledQuery:
    """Compile an XPath expression. Raises QueryError if it is invalid."""
    try:
        compiled = etree.XPath(expression)
    except etree.XPathError as e:
        raise QueryError(f"Invalid XPath expression {expression!r}: {e}") from e
    return CompiledQuery(expression, "xpath", compiled)


def parse_html(source: str | bytes) -> etree._Element:
    """Parse an HTML document into an lxml tree."""
    if not source or not source.strip():
        raise ValueError("Cannot parse an empty document")
    if isinstance(source, str):
        # lxml rejects str input carrying an encoding declaration
        source = _XML_DECLARATION.sub("", source, count=1)
    try:
        return lxml.html.document_fromstring(source)
    except etree.ParserError as e:
        raise ValueError(f"Cannot parse document: {e}") from e


def select(node: Any, query: CompiledQuery) -> list:
    """Run `query` against `node`, returning matches in document order.

    XPath expressions evaluating to a scalar (count(), string(), ...) yield a
    single-item list.
    """
    if not etree.iselement(node):
        raise QueryError(f"Cannot evaluate {query!r} against non-element {type(node).__name__}")

    try:
        result = query._selector(node)
    except etree.XPathError as e:
        raise QueryError(f"Failed to evaluate {query!r}: {e}") from e

    if isinstance(result, list):
        return result
    return [result]


def read_property(node: Any, name: str) -> str | None:
    """Read a named property off a node. Absent properties yield None."""
    if node is None:
        return None

    # XPath can select attribute values and text nodes directly
    if not etree.iselement(node):
        return str(node) if name in TEXT_PROPERTIES else None

    if name in TEXT_PROPERTIES:
        return etree.tostring(node, method="text", encoding="unicode", with_tail=False)

    if name in INNER_HTML_PROPERTIES:
        children = "".join(lxml.html.tostring(child, encoding="unicode") for child in node)
        return escape(node.text or "", quote=False) + children

    if name in OUTER_HTML_PROPERTIES:
        return lxml.html.tostring(node, encoding="unicode", with_tail=False)

    if name == "tagName":
        return node.tag.upper() if isinstance(node.tag, str) else None

    return node.get(name)


def extract(name: str) -> Callable[[Any], str | None]:
    """Build an extractor reading property `name` off a node."""

    def extractor(node: Any) -> str | None:
        return read_property(node, name)

    extractor.__name__ = f"extract_{name}"
    return extractor
