# tabclean/api/endpoints.py
import uuid
import asyncio
import logging
from fastapi import APIRouter, HTTPException, UploadFile, File, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from typing import Dict, Any, List, Optional, Tuple

from tabclean.config import get_settings
from tabclean.errors import UnsupportedInput, UnsupportedFormat
from tabclean.engine.runner import stream_pipeline
from tabclean.loaders import load_table, rows_to_csv, cleaned_filename
from tabclean.models import Analysis, Table
from tabclean.registry import list_stages
from tabclean.workflows.analysis import analyze_with_log, build_pipeline, initial_state

logger = logging.getLogger(__name__)

router = APIRouter()


def _table_from_payload(payload: Dict[str, Any]) -> Table:
    rows: List[Dict[str, Any]] = payload.get("rows") or []
    columns: Optional[List[str]] = payload.get("columns")
    return Table.from_records(rows, columns or None)


def _analyze(table: Table) -> Tuple[str, Analysis, List[Dict[str, Any]]]:
    run_id = str(uuid.uuid4())
    try:
        analysis, log = analyze_with_log(table)
    except UnsupportedInput as e:
        logger.warning("run %s rejected: %s", run_id, e)
        raise HTTPException(status_code=422, detail=str(e))
    return run_id, analysis, log


def _run(table: Table) -> Dict[str, Any]:
    run_id, analysis, log = _analyze(table)
    result = analysis.to_dict()
    result.update({"run_id": run_id, "log": log})
    return result


async def _load_upload(file: UploadFile) -> Table:
    settings = get_settings()
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="file too large")
    try:
        return load_table(file.filename, content)
    except UnsupportedFormat as e:
        logger.warning("upload %s rejected: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/stages")
def get_stages():
    return {"stages": list_stages()}


@router.post("/analyze")
def analyze_table(payload: Dict[str, Any]):
    try:
        table = _table_from_payload(payload)
    except (ValueError, TypeError, AttributeError) as e:
        raise HTTPException(status_code=422, detail=f"malformed table: {e}")
    return _run(table)


@router.post("/analyze/upload")
async def analyze_upload(file: UploadFile = File(...)):
    table = await _load_upload(file)
    result = await run_in_threadpool(_run, table)
    result["filename"] = file.filename
    return result


@router.post("/analyze/export")
async def export_cleaned(file: UploadFile = File(...)):
    """Analyze an upload and return its cleaned rows as a CSV download."""
    table = await _load_upload(file)
    run_id, analysis, _ = await run_in_threadpool(_analyze, table)
    content = rows_to_csv(analysis.cleaned_data, table.columns)
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{cleaned_filename(file.filename)}"',
            "X-Run-Id": run_id,
        },
    )

# -------------------------
# WebSocket streaming endpoint
# -------------------------
@router.websocket("/ws/analyze")
async def websocket_analyze(websocket: WebSocket):
    await websocket.accept()
    settings = get_settings()
    try:
        try:
            payload = await websocket.receive_json()
            table = _table_from_payload(payload)
        except (ValueError, TypeError, AttributeError) as e:
            # ValueError covers frames that are not JSON at all
            await websocket.send_json({"type": "error", "message": f"malformed table: {e}"})
            await websocket.close()
            return

        run_id = str(uuid.uuid4())
        async for event in stream_pipeline(build_pipeline(), initial_state(table), run_id):
            await websocket.send_json(event)
            if settings.stream_delay:
                await asyncio.sleep(settings.stream_delay)

        await websocket.close()
    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")
