"""
app.py - FastAPI front end for the text pattern engine
"""
from fastapi import FastAPI, HTTPException, Request, Depends, Query, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field
from typing import Optional, Union
from datetime import datetime
from contextlib import asynccontextmanager
from pathlib import Path
import asyncio
import tempfile
import threading

from prometheus_client import CONTENT_TYPE_LATEST

from config import settings
from logger import get_logger
from metrics import track_request, pattern_operations, pattern_errors, analysis_duration, get_metrics
from pattern_matching import (
    MatchFlag,
    PatternEntry,
    PatternRegistry,
    PatternSyntaxError,
    ReplacementError,
    TextProcessingError,
    InvalidArgumentError,
    create_common_pattern_collection,
    match_all_entries,
    find_matches,
    highlight_matches,
    replace_all,
    is_valid_pattern,
    get_detailed_matches
)
from text_analysis import (
    word_frequency_analysis,
    summarize_text,
    extract_emails,
    extract_urls,
    format_word_frequency,
    format_summary
)
from validation import parse_int_field

logger = get_logger(__name__)

MAX_TEXT_LENGTH = settings.get('max_text_length', 1000000)


class RegistryStore:
    """The session's pattern registry and the lock that serializes access to it"""

    def __init__(self, registry: PatternRegistry):
        self.registry = registry
        self.lock = threading.Lock()


_store = RegistryStore(create_common_pattern_collection())


def get_store() -> RegistryStore:
    return _store


async def run_blocking(func, *args):
    """Run a CPU-bound core call on the default executor"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Restore saved patterns on startup"""
    patterns_file = Path(settings.patterns_file)
    if patterns_file.is_file():
        with _store.lock:
            if _store.registry.load_from_file(patterns_file):
                logger.info(f"Restored {len(_store.registry)} saved patterns")
            else:
                logger.warning(f"Could not restore saved patterns from {patterns_file}")

    logger.info(f"Application {settings.app_name} v{settings.version} started in {settings.environment} mode")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.get('app_name'),
    version=settings.get('version'),
    lifespan=lifespan,
    docs_url="/api/docs" if settings.get('debug') else None,
    redoc_url="/api/redoc" if settings.get('debug') else None,
    openapi_url="/openapi.json" if settings.get('debug') else None
)


# Request/Response Models
class PatternRequest(BaseModel):
    text: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    pattern: str = ""
    multiline: bool = False
    case_insensitive: bool = False

    @property
    def flags(self) -> MatchFlag:
        flags = MatchFlag.NONE
        if self.multiline:
            flags |= MatchFlag.MULTILINE
        if self.case_insensitive:
            flags |= MatchFlag.CASE_INSENSITIVE
        return flags


class HighlightRequest(PatternRequest):
    prefix: str = "[["
    suffix: str = "]]"


class ReplaceRequest(PatternRequest):
    replacement: str = ""


class ProcessRequest(PatternRequest):
    saved_pattern: Optional[str] = None
    find: bool = False
    highlight: bool = False
    replace: bool = False
    prefix: str = "[["
    suffix: str = "]]"
    replacement: str = ""


class ValidateRequest(BaseModel):
    pattern: Optional[str] = None


class AnalyzeRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)
    word_frequency: bool = True
    summarize: bool = False
    min_word_length: Optional[Union[int, str]] = None
    max_sentences: Optional[Union[int, str]] = None


class TextRequest(BaseModel):
    text: str = Field(default="", max_length=MAX_TEXT_LENGTH)


class ImportRequest(BaseModel):
    content: str


class PatternEntryModel(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    pattern: str = Field(..., min_length=1)
    multiline: bool = False
    case_insensitive: bool = False

    @classmethod
    def from_entry(cls, entry: PatternEntry) -> "PatternEntryModel":
        return cls(**entry.to_dict())

    def to_entry(self) -> PatternEntry:
        return PatternEntry(
            name=self.name,
            pattern=self.pattern,
            multiline=self.multiline,
            case_insensitive=self.case_insensitive
        )


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    environment: str
    patterns: int


def create_error_response(status_code: int, detail: str, **extra) -> JSONResponse:
    """Create standardized error response"""
    content = {"detail": detail}
    content.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=content)


# API Routes
@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(store: RegistryStore = Depends(get_store)):
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        version=settings.version,
        environment=settings.environment,
        timestamp=datetime.utcnow().isoformat(),
        patterns=len(store.registry)
    )


@app.get("/metrics", tags=["System"])
async def metrics():
    """Prometheus metrics endpoint"""
    if not settings.enable_metrics:
        raise HTTPException(status_code=404)

    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)


@app.post("/find", tags=["Matching"])
@track_request("POST", "/find")
async def find(request: PatternRequest):
    """Find all matches of a pattern"""
    pattern_operations.labels('find').inc()
    matches = await run_blocking(find_matches, request.text, request.pattern, request.flags)
    return {"matches": matches, "count": len(matches)}


@app.post("/matches", tags=["Matching"])
@track_request("POST", "/matches")
async def detailed_matches(request: PatternRequest):
    """Find all matches with offsets and captured groups"""
    pattern_operations.labels('detailed').inc()
    matches = await run_blocking(
        get_detailed_matches, request.text, request.pattern, request.flags
    )
    return {"matches": [m.to_dict() for m in matches], "count": len(matches)}


@app.post("/highlight", tags=["Matching"])
@track_request("POST", "/highlight")
async def highlight(request: HighlightRequest):
    """Wrap every match with a prefix and suffix"""
    pattern_operations.labels('highlight').inc()
    result = await run_blocking(
        highlight_matches, request.text, request.pattern, request.prefix, request.suffix, request.flags
    )
    return {"result": result}


@app.post("/replace", tags=["Matching"])
@track_request("POST", "/replace")
async def replace(request: ReplaceRequest):
    """Replace every match; $n and ${name} refer to captured groups"""
    pattern_operations.labels('replace').inc()
    result = await run_blocking(
        replace_all, request.text, request.pattern, request.replacement, request.flags
    )
    return {"result": result}


@app.post("/validate", tags=["Matching"])
async def validate(request: ValidateRequest):
    """Check whether a pattern compiles"""
    return {"pattern": request.pattern, "valid": is_valid_pattern(request.pattern)}


@app.post("/process", tags=["Matching"])
@track_request("POST", "/process")
async def process(request: ProcessRequest, store: RegistryStore = Depends(get_store)):
    """
    Run the find -> highlight -> replace chain

    A saved pattern name, when given, supplies the pattern and its flags.
    """
    if not request.text:
        raise InvalidArgumentError("No input text to process", field="text")

    pattern, flags = request.pattern, request.flags
    if request.saved_pattern:
        with store.lock:
            entry = store.registry.get(request.saved_pattern)
        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Saved pattern not found: {request.saved_pattern}"
            )
        pattern, flags = entry.pattern, entry.flags

    if not pattern and (request.find or request.highlight or request.replace):
        raise InvalidArgumentError("Please enter a regex pattern", field="pattern")

    def run_chain():
        matches = find_matches(request.text, pattern, flags) if request.find else None
        result = request.text
        if request.highlight:
            result = highlight_matches(result, pattern, request.prefix, request.suffix, flags)
        if request.replace:
            result = replace_all(result, pattern, request.replacement, flags)
        return matches, result

    pattern_operations.labels('process').inc()
    matches, result = await run_blocking(run_chain)

    return {
        "pattern": pattern,
        "matches": matches,
        "count": len(matches) if matches is not None else None,
        "result": result
    }


@app.post("/analyze", tags=["Analysis"])
@track_request("POST", "/analyze")
async def analyze(request: AnalyzeRequest):
    """Word frequency and/or summary of a text"""
    if not request.word_frequency and not request.summarize:
        raise InvalidArgumentError("Please select at least one analysis")

    min_word_length = parse_int_field(
        request.min_word_length, settings.default_min_word_length, "min_word_length"
    )
    max_sentences = parse_int_field(
        request.max_sentences, settings.default_max_sentences, "max_sentences", minimum=1
    )

    response = {"word_frequency": None, "summary": None}
    report = []

    if request.word_frequency:
        with analysis_duration.labels('frequency').time():
            frequencies = await run_blocking(word_frequency_analysis, request.text, min_word_length)
        response["word_frequency"] = frequencies
        report.append(format_word_frequency(frequencies, settings.frequency_report_limit))

    if request.summarize:
        with analysis_duration.labels('summary').time():
            summary = await run_blocking(summarize_text, request.text, max_sentences)
        response["summary"] = summary
        report.append(format_summary(summary))

    response["report"] = "\n\n".join(report)
    return response


@app.post("/extract", tags=["Analysis"])
async def extract(request: TextRequest):
    """Extract unique email addresses and URLs"""
    return {"emails": extract_emails(request.text), "urls": extract_urls(request.text)}


@app.get("/patterns", tags=["Patterns"])
async def list_patterns(
    name_filter: Optional[str] = Query(None, alias="filter"),
    store: RegistryStore = Depends(get_store)):
    """List saved patterns, optionally filtered by a name substring"""
    with store.lock:
        entries = store.registry.find_by_name_substring(name_filter)
    return {
        "patterns": [PatternEntryModel.from_entry(e) for e in entries],
        "total": len(entries)
    }


@app.post("/patterns", status_code=status.HTTP_201_CREATED, tags=["Patterns"])
async def add_pattern(entry: PatternEntryModel, store: RegistryStore = Depends(get_store)):
    """Save a new named pattern"""
    with store.lock:
        added = store.registry.add(entry.to_entry())

    if not added:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Pattern '{entry.name}' already exists or is invalid"
        )
    return entry


@app.post("/patterns/process", tags=["Patterns"])
@track_request("POST", "/patterns/process")
async def process_with_all_patterns(request: TextRequest, store: RegistryStore = Depends(get_store)):
    """Run every saved pattern against a text"""
    pattern_operations.labels('registry').inc()
    with store.lock:
        entries = store.registry.snapshot()
    results = await run_blocking(match_all_entries, entries, request.text)
    return {"results": results}


@app.post("/patterns/save", tags=["Patterns"])
async def save_patterns(store: RegistryStore = Depends(get_store)):
    """Save the registry to the configured patterns file"""
    with store.lock:
        saved = store.registry.save_to_file(settings.patterns_file)
        total = len(store.registry)

    if not saved:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save patterns"
        )
    return {"saved": total, "file": settings.patterns_file}


@app.post("/patterns/load", tags=["Patterns"])
async def load_patterns(store: RegistryStore = Depends(get_store)):
    """Replace the registry with the configured patterns file"""
    with store.lock:
        loaded = store.registry.load_from_file(settings.patterns_file)
        total = len(store.registry)

    if not loaded:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not load saved patterns"
        )
    return {"loaded": total, "file": settings.patterns_file}


@app.get("/patterns/export", response_class=PlainTextResponse, tags=["Patterns"])
async def export_patterns(store: RegistryStore = Depends(get_store)):
    """Export the registry in the Name/Pattern/Multiline/Case Insensitive text format"""
    with tempfile.TemporaryDirectory() as tmp_dir:
        export_path = Path(tmp_dir) / "patterns.txt"
        with store.lock:
            exported = store.registry.export_to_text_file(export_path)
        if not exported:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No patterns to export")
        return export_path.read_text(encoding="utf-8")


@app.post("/patterns/import", tags=["Patterns"])
async def import_patterns(request: ImportRequest, store: RegistryStore = Depends(get_store)):
    """Import patterns from the text export format"""
    with tempfile.TemporaryDirectory() as tmp_dir:
        import_path = Path(tmp_dir) / "patterns.txt"
        import_path.write_text(request.content, encoding="utf-8")
        with store.lock:
            imported = store.registry.import_from_text_file(import_path)
    return {"imported": imported}


@app.get("/patterns/{name}", tags=["Patterns"])
async def get_pattern(name: str, store: RegistryStore = Depends(get_store)):
    """Get a saved pattern by name"""
    with store.lock:
        entry = store.registry.get(name)

    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pattern not found")
    return PatternEntryModel.from_entry(entry)


@app.put("/patterns/{name}", tags=["Patterns"])
async def update_pattern(name: str, entry: PatternEntryModel, store: RegistryStore = Depends(get_store)):
    """Replace a saved pattern; a different name in the body renames it"""
    with store.lock:
        if name not in store.registry:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pattern not found")
        updated = store.registry.update(name, entry.to_entry())

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Pattern '{name}' could not be updated"
        )
    return entry


@app.delete("/patterns/{name}", tags=["Patterns"])
async def delete_pattern(name: str, store: RegistryStore = Depends(get_store)):
    """Delete a saved pattern"""
    with store.lock:
        removed = store.registry.remove(name)

    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pattern not found")
    return {"message": "Pattern deleted successfully", "name": name}


# Error handlers
@app.exception_handler(PatternSyntaxError)
async def pattern_syntax_error_handler(request: Request, exc: PatternSyntaxError):
    pattern_errors.labels(request.url.path).inc()
    logger.warning(f"Invalid regex pattern in {request.url.path}: {exc}")
    return create_error_response(
        status.HTTP_400_BAD_REQUEST,
        f"The regex pattern is invalid: {exc.description}",
        pattern=exc.pattern,
        position=exc.position
    )


@app.exception_handler(ReplacementError)
async def replacement_error_handler(request: Request, exc: ReplacementError):
    logger.warning(f"Invalid replacement in {request.url.path}: {exc}")
    return create_error_response(
        status.HTTP_400_BAD_REQUEST,
        f"The replacement is invalid: {exc.description}",
        replacement=exc.replacement
    )


@app.exception_handler(TextProcessingError)
async def text_processing_error_handler(request: Request, exc: TextProcessingError):
    logger.warning(f"Rejected request to {request.url.path}: {exc}")
    field = exc.field if isinstance(exc, InvalidArgumentError) else None
    return create_error_response(status.HTTP_400_BAD_REQUEST, exc.message, field=field)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception in {request.url.path}: {str(exc)}",
                 exc_info=settings.debug)
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) if settings.debug else "An unexpected error occurred"
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=(settings.environment == "development"),
    )
