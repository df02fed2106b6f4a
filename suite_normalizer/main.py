import logging
from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile

from .config import Config, load_config_from_env
from .errors import NormalizeError
from .models import HealthResponse, NormalizeResponse, SchemaRevision
from .normalize import normalize_yaml_bytes
from .rules import YAML_SUFFIXES

logger = logging.getLogger(__name__)

app = FastAPI(
    title="suite-normalizer",
    description="Convert legacy liblouis YAML test suites to the canonical format",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_suite(
    file: UploadFile = File(...),
    schema_revision: Optional[SchemaRevision] = Query(default=None, alias="schema"),
    cfg: Config = Depends(load_config_from_env),
):
    if not file.filename.lower().endswith(YAML_SUFFIXES):
        raise HTTPException(status_code=422, detail="Only YAML files are supported")

    raw = await file.read(cfg.max_upload_bytes + 1)
    if len(raw) > cfg.max_upload_bytes:
        raise HTTPException(status_code=413, detail=f"File exceeds {cfg.max_upload_bytes} bytes")

    revision = schema_revision or cfg.schema_revision
    try:
        return normalize_yaml_bytes(raw, revision)
    except NormalizeError as e:
        logger.warning("Rejected %s: %s", file.filename, e)
        raise HTTPException(status_code=422, detail=str(e)) from e
