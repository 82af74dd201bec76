from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from .errors import UsageError
from .models import ConvertResponse, HealthResponse
from .normalize import decode_document
from .parse import parse_with_report
from .rules import ALLOWED_EXTENSIONS, INPUT_DELIMITER, MAX_UPLOAD_BYTES, resolve_delimiter

app = FastAPI(
    title="csv2json",
    description="Delimited text to JSON records",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/convert", response_model=ConvertResponse)
async def convert_csv(
    file: UploadFile = File(...),
    delimiter: str = Query(INPUT_DELIMITER),
    multiline: bool = Query(True),
):
    if not file.filename or not file.filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only CSV, TSV or TXT files are supported")

    try:
        delimiter = resolve_delimiter(delimiter)
    except UsageError as e:
        raise HTTPException(status_code=422, detail=str(e))

    raw = await file.read()
    if len(raw) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES} bytes")

    text, encoding = decode_document(raw)
    records, report = parse_with_report(text, delimiter, multiline=multiline)
    return {"records": records, "report": {**report, "encoding": encoding}}
