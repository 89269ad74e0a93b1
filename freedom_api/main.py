from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI, File, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from freedom_api.schemas import DashboardFiltersModel, MetaListResponse, UploadResponse
from freedom_core.data import is_supported_filename, prepare_context, records_to_frame
from freedom_core.errors import IngestionError, ReadFailure, UnsupportedFileType
from freedom_core.filters import DashboardFilters, normalize_filters
from freedom_core.metrics_overview import compute_overview
from freedom_core.metrics_table import compute_table
from freedom_core.metrics_visualization import compute_visualization
from freedom_core.records import CANONICAL_STATUSES
from freedom_core.session import DatasetStore


app = FastAPI(title="Freedom Analytics API", version="0.1.0")
logger = logging.getLogger(__name__)

# One local dashboard session; uploads replace its dataset wholesale.
store = DatasetStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: DashboardFiltersModel) -> DashboardFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


@app.post("/upload", response_model=UploadResponse)
def upload(file: UploadFile = File(...)):
    filename = file.filename or ""
    try:
        if not is_supported_filename(filename):
            raise UnsupportedFileType(f"Unsupported file type: {filename} (expected .xlsx, .xls or .csv)")
        try:
            content = file.file.read()
        except OSError as exc:
            raise ReadFailure(f"Could not read upload: {exc}") from exc
        dataset = store.ingest(content, filename)
    except IngestionError as exc:
        return _error(400, exc)
    except Exception as exc:
        logger.exception("upload failed")
        return _error(500, exc)
    response = UploadResponse(
        records=len(dataset.records),
        source_name=dataset.source_name,
        columns=dataset.columns,
        loaded_at=dataset.loaded_at,
    )
    return _json(response.model_dump())


@app.get("/meta/regions", response_model=MetaListResponse)
def meta_regions():
    try:
        ctx = prepare_context({}, store.records)
        return _json({"values": ctx["regions"]})
    except Exception as exc:
        logger.exception("meta_regions failed")
        return _error(500, exc)


@app.get("/meta/statuses", response_model=MetaListResponse)
def meta_statuses():
    try:
        ctx = prepare_context({}, store.records)
        extra = [s for s in ctx["statuses"] if s not in CANONICAL_STATUSES]
        return _json({"values": list(CANONICAL_STATUSES) + extra})
    except Exception as exc:
        logger.exception("meta_statuses failed")
        return _error(500, exc)


@app.post("/overview")
def overview(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, store.records)
        return _json(compute_overview(f, ctx))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(500, exc)


@app.post("/visualization")
def visualization(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, store.records)
        return _json(compute_visualization(f, ctx))
    except Exception as exc:
        logger.exception("visualization failed")
        return _error(500, exc)


@app.post("/table")
def table(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, store.records)
        return _json(compute_table(f, ctx))
    except Exception as exc:
        logger.exception("table failed")
        return _error(500, exc)


@app.post("/export")
def export(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, store.records)
        export_df = records_to_frame(ctx["filtered"], include_extras=True)
        csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    except Exception as exc:
        logger.exception("export failed")
        return _error(500, exc)
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": "attachment; filename=freedom_data.csv"})
