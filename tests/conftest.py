"""Shared test fixtures for docharvest tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path so the package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from docharvest.query import parse_html


@pytest.fixture
def product_html() -> str:
    """Single product page from the README example."""
    return """
    <html>
      <body>
        <div class="product">
          <h1 id="title">  Cool Gadget  </h1>
          <span class="price">$99.99</span>
          <div class="details">
            <span data-spec="weight">250g</span>
            <a href="/specs.pdf">Download Specs</a>
          </div>
        </div>
      </body>
    </html>
    """


@pytest.fixture
def catalog_html() -> str:
    """Listing page with several products, used for multiple/nested fields."""
    return """
    <html>
      <head><title>Catalog</title></head>
      <body>
        <ul id="products">
          <li class="item" data-sku="A1">
            <a class="name" href="/p/a1">Alpha</a>
            <span class="price">$10.00</span>
            <span class="tag">new</span><span class="tag">sale</span>
          </li>
          <li class="item" data-sku="B2">
            <a class="name" href="/p/b2">Beta</a>
            <span class="price">$20.50</span>
          </li>
          <li class="item" data-sku="C3">
            <a class="name" href="/p/c3">Gamma</a>
            <span class="price">$1,299.00</span>
            <span class="tag">premium</span>
          </li>
        </ul>
        <p id="note">Prices <b>include</b> VAT &amp; shipping</p>
      </body>
    </html>
    """


@pytest.fixture
def catalog_document(catalog_html: str):
    return parse_html(catalog_html)


@pytest.fixture
def product_record() -> dict:
    """Raw record as extracted from the README example page."""
    return {
        "name": "  Cool Gadget  ",
        "price": "$99.99",
        "weight": "250g",
        "specsUrl": "/specs.pdf",
    }
