"""FastAPI service exposing extraction + transformation over JSON.

The caller posts an HTML document together with a declarative extraction
model and an optional transformation model; the cleaned record comes back.
Fetching documents is the caller's job.
"""

import logging
import time

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from docharvest import __version__
from docharvest.config import settings
from docharvest.extraction import ExtractionError, HtmlParser
from docharvest.models import (
    ExtractRequest,
    ExtractResponse,
    build_extraction_model,
    build_transforming_model,
)
from docharvest.query import QueryError
from docharvest.transformation import TransformError, Transformer

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="docharvest", version=__version__)


@app.post("/api/v1/extract", response_model=ExtractResponse)
async def extract(request: ExtractRequest):
    """Extract the requested fields from an HTML document and clean them."""
    start = time.monotonic()

    size = len(request.html.encode("utf-8"))
    if size > settings.MAX_DOCUMENT_BYTES:
        return JSONResponse(
            status_code=413,
            content={"detail": f"Document is {size} bytes, limit is {settings.MAX_DOCUMENT_BYTES}"},
        )

    try:
        extraction_model = build_extraction_model(request.fields)
        transforming_model = build_transforming_model(request.transforms)
        parser = HtmlParser(request.html)
    except (QueryError, ValueError) as e:
        logger.info("Rejected extraction request: %s", e)
        return JSONResponse(status_code=400, content={"detail": str(e)})

    logger.info(
        "Processing extraction: fields=%d transforms=%d size=%d bytes",
        len(extraction_model),
        len(transforming_model),
        size,
    )

    try:
        raw = await parser.extract_model(extraction_model)
        data = await Transformer(raw).transform(transforming_model)
    except QueryError as e:
        logger.error("Query failed: %s", e)
        return JSONResponse(status_code=400, content={"detail": str(e)})
    except ExtractionError as e:
        logger.error("Extraction failed: %s", e)
        return JSONResponse(status_code=422, content={"detail": str(e), "field": e.field})
    except TransformError as e:
        logger.error("Transform failed: %s", e)
        return JSONResponse(
            status_code=422,
            content={"detail": str(e), "field": e.field, "step_index": e.step_index},
        )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    return ExtractResponse(data=data, processing_time_ms=elapsed_ms)


@app.get("/health")
async def health():
    """Return service status."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
