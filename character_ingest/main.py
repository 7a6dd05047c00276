from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import PlainTextResponse

from .config import IngestionSettings, get_ingestion_settings
from .dialects import detect_dialect, get_dialect, template_for
from .errors import IngestionError
from .models import HealthResponse, IngestResponse, IngestTextRequest
from .pipeline import IngestionResult, ingest
from .preprocess import decode_payload, encoding_label

app = FastAPI(
    title="character-ingest",
    description="Tolerant character import: delimited text and JSON to canonical records",
    version="0.1.0",
)


def _run(
    text: str,
    *,
    dialect: Optional[str],
    filename: Optional[str],
    encoding: str,
    expected: Optional[int],
    settings: IngestionSettings,
) -> IngestResponse:
    try:
        resolved = get_dialect(dialect) if dialect else detect_dialect(text, filename)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        result: IngestionResult = ingest(text, resolved, encoding=encoding, settings=settings)
    except IngestionError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc

    return IngestResponse(
        records=list(result.records),
        report=result.report.to_model(expected=expected, ratio=settings.low_yield_ratio),
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/ingest", response_model=IngestResponse)
async def ingest_file(
    file: UploadFile = File(...),
    dialect: Optional[str] = Query(default=None, description="csv, localized or json; detected when omitted"),
    expected: Optional[int] = Query(default=None, ge=0, description="Expected record count for yield reporting"),
    settings: IngestionSettings = Depends(get_ingestion_settings),
):
    raw = await file.read()
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Upload exceeds the configured size limit")

    try:
        text, encoding = decode_payload(raw)
    except IngestionError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc

    return _run(
        text,
        dialect=dialect,
        filename=file.filename,
        encoding=encoding,
        expected=expected,
        settings=settings,
    )


@app.post("/ingest/text", response_model=IngestResponse)
def ingest_text_body(
    body: IngestTextRequest,
    settings: IngestionSettings = Depends(get_ingestion_settings),
):
    return _run(
        body.text,
        dialect=body.dialect,
        filename=None,
        encoding=encoding_label(body.text),
        expected=body.expected,
        settings=settings,
    )


@app.get("/templates/{dialect}", response_class=PlainTextResponse)
def download_template(dialect: str):
    try:
        resolved = get_dialect(dialect)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return PlainTextResponse(template_for(resolved), media_type="text/plain; charset=utf-8")
