# propedit/server.py
from fastapi import FastAPI, File, UploadFile, HTTPException, Query
from fastapi.responses import HTMLResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from datetime import timedelta, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import quote
import logging
import uvicorn
from propedit.errors import PropEditError, NoActiveSession
from propedit.office.session import MetadataEditor
from propedit.utils.signature import detect_extension, ext_equivalent
from propedit.settings import STATIC_DIR, ALLOWED_EXTENSIONS, MAX_FILE_SIZE, LOG_LEVEL, HOST, PORT

logger = logging.getLogger(__name__)

app = FastAPI(title="Office Metadata Editor")

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# One edit session at a time; loading a new file discards the previous one
editor = MetadataEditor()

class FieldEdits(BaseModel):
    creator: Optional[str] = None
    lastModifiedBy: Optional[str] = None
    created: Optional[str] = None
    modified: Optional[str] = None

@app.on_event("startup")
def bootstrap():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")

@app.get("/", response_class=HTMLResponse)
def home():
    index_path = STATIC_DIR / "index.html"
    return index_path.read_text(encoding="utf-8")

def _secure_ext(filename: str) -> str:
    return Path(filename).suffix.lower()

def _client_tz(tz_offset: Optional[int]):
    # Same sign as JavaScript's Date.getTimezoneOffset(): minutes *behind* UTC
    # Browsers report between -840 (UTC+14) and 720 (UTC-12)
    if tz_offset is None:
        return None
    return timezone(-timedelta(minutes=tz_offset))

async def _validate_and_read(upload_file: UploadFile) -> bytes:
    ext = _secure_ext(upload_file.filename or "")
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=400, detail=f"Extension {ext or '(none)'} not allowed.")

    data = await upload_file.read()

    if len(data) > MAX_FILE_SIZE:
        raise HTTPException(status_code=413, detail=f"File too large. Limit is {MAX_FILE_SIZE} bytes.")

    _verify_signature(data, upload_file.filename)
    return data

def _verify_signature(data: bytes, filename: str) -> None:
    claimed = Path(filename).suffix.lower()
    detected = detect_extension(data)
    if detected is None:
        raise HTTPException(status_code=400, detail="Not an Office Open XML package.")
    if not ext_equivalent(claimed, detected):
        raise HTTPException(
            status_code=400,
            detail=f"Extension mismatch: file looks like {detected} but was uploaded as {claimed}."
        )

def _content_disposition(name: str) -> str:
    quoted = quote(name)
    if quoted == name:
        return f'attachment; filename="{name}"'
    return f"attachment; filename*=utf-8''{quoted}"

def _http_error(exc: PropEditError) -> HTTPException:
    status = 409 if isinstance(exc, NoActiveSession) else 400
    return HTTPException(status_code=status, detail=exc.message)

@app.post("/load")
async def load(upload: UploadFile = File(...), tz_offset: Optional[int] = Query(None, ge=-840, le=840)):
    try:
        data = await _validate_and_read(upload)
    except HTTPException as e:
        logger.warning("Rejected upload %s: %s", upload.filename, e.detail)
        raise
    try:
        fields = editor.load(data, filename=upload.filename, tz=_client_tz(tz_offset))
    except PropEditError as e:
        logger.warning("Could not load %s: %s", upload.filename, e.message)
        raise _http_error(e) from e
    return {
        "filename": upload.filename,
        "size": len(data),
        "fields": fields,
    }

@app.post("/save")
def save(edits: FieldEdits):
    try:
        data = editor.save(edits.model_dump(exclude_none=True))
        name = editor.download_name()
    except PropEditError as e:
        raise _http_error(e) from e
    return Response(
        content=data,
        media_type="application/octet-stream",
        headers={"Content-Disposition": _content_disposition(name)},
    )

@app.post("/reset")
def reset():
    editor.reset()
    return {"state": editor.state.value}

def main():
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())

if __name__ == "__main__":
    main()
