"""FastAPI application exposing the worksheet pipeline."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from vocab_worksheet.analysis import analyze_request, reanalyze, refine, synthesize
from vocab_worksheet.config import Settings, load_settings, save_settings
from vocab_worksheet.dataset import FileSource, HttpSource, VocabStore
from vocab_worksheet.extractor import config_from_request, find_missing_fields
from vocab_worksheet.levels import GRADE_LEVELS, QUESTION_TYPE_NAMES, to_level_korean
from vocab_worksheet.models import AnalysisResult

app = FastAPI(title="Vocab Worksheet")

log = logging.getLogger("vocab_worksheet.app")

# Global state (initialized in startup)
_store: VocabStore | None = None
_settings: Settings | None = None

CANNOT_GENERATE_MESSAGE = (
    "조건이 맞지 않아 문제를 생성할 수 없습니다. "
    "마스터 테이블에 해당 조건에 맞는 문제 데이터가 없습니다."
)


def get_store() -> VocabStore:
    assert _store is not None
    return _store


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def _make_store(s: Settings) -> VocabStore:
    if s.data_source == "file":
        return VocabStore(FileSource(s.data_full_path))
    elif s.data_source == "http":
        return VocabStore(HttpSource(s.data_url))
    raise ValueError(f"Unknown data source: {s.data_source}")


def _get_llm():
    s = get_settings()
    if s.analyzer == "offline":
        return None
    elif s.analyzer == "ollama":
        from vocab_worksheet.providers.llm_ollama import OllamaProvider
        return OllamaProvider(base_url=s.ollama_url, model=s.llm_model)
    elif s.analyzer == "anthropic":
        from vocab_worksheet.providers.llm_anthropic import AnthropicProvider
        return AnthropicProvider()
    raise ValueError(f"Unknown analyzer: {s.analyzer}")


@app.on_event("startup")
async def startup():
    global _store, _settings
    if _store is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _store = _make_store(_settings)
    index = await _store.get_index()
    log.info("Dataset %s: %d levels", _store.source.name(), len(index))


async def _json_body(request: Request) -> dict:
    if not await request.body():
        return {}
    body = await request.json()
    if not isinstance(body, dict):
        raise HTTPException(400, "JSON object expected")
    return body


# ── API: Dataset ──────────────────────────────────────────────────────────

@app.get("/api/levels")
async def api_levels():
    index = await get_store().get_index()
    return {
        "levels": [
            {
                "level": level,
                "label": to_level_korean(level),
                "count": index.get(level, {}).get("count", 0),
            }
            for level in GRADE_LEVELS
        ],
        "question_types": QUESTION_TYPE_NAMES,
    }


@app.get("/api/vocab")
async def api_vocab(level: str | None = None):
    table = await get_store().get_table()
    if level:
        table = [v for v in table if v.level == level]
    return [v.to_dict(include_questions=False) for v in table]


@app.get("/api/status")
async def api_status():
    store = get_store()
    return {
        "data_source": store.source.name(),
        "available": store.available,
        "unavailable": sorted(store.unavailable),
        "analyzer": get_settings().analyzer,
    }


# ── API: Settings ─────────────────────────────────────────────────────────

DATA_FIELDS = ("data_source", "data_dir", "data_url")
ANALYZERS = ("offline", "ollama", "anthropic")


@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    global _store
    body = await _json_body(request)
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    updated = Settings(**{**s.to_dict(), **{k: v for k, v in body.items() if k in known}})
    if updated.analyzer not in ANALYZERS:
        raise HTTPException(400, f"Unknown analyzer: {updated.analyzer}")
    try:
        store = _make_store(updated) if any(
            getattr(updated, k) != getattr(s, k) for k in DATA_FIELDS
        ) else None
    except (TypeError, ValueError) as e:
        raise HTTPException(400, str(e))

    for k in known:
        setattr(s, k, getattr(updated, k))
    if store is not None:
        _store = store  # Fresh cache for the new dataset
        log.info("Dataset switched to %s", store.source.name())
    save_settings(s)
    return s.to_dict()


# ── API: Analysis ─────────────────────────────────────────────────────────

@app.post("/api/analyze")
async def api_analyze(request: Request):
    body = await _json_body(request)
    text = body.get("text", "")
    if not isinstance(text, str) or not text.strip():
        raise HTTPException(400, "text is required")
    result = await analyze_request(text, get_store(), _get_llm())
    return result.to_dict()


@app.post("/api/refine")
async def api_refine(request: Request):
    body = await _json_body(request)
    if not isinstance(body.get("analysis"), dict) or "field" not in body:
        raise HTTPException(400, "analysis and field are required")
    try:
        current = AnalysisResult.from_dict(body["analysis"])
        current.extracted = config_from_request(body["analysis"].get("extracted") or {})
        refined = await refine(current, body["field"], body.get("value"), get_store())
    except ValueError as e:
        raise HTTPException(400, str(e))
    return refined.to_dict()


@app.post("/api/reanalyze")
async def api_reanalyze(request: Request):
    body = await _json_body(request)
    text, addition = body.get("text", ""), body.get("addition", "")
    if not isinstance(text, str) or not isinstance(addition, str):
        raise HTTPException(400, "text and addition must be strings")
    try:
        combined, result = await reanalyze(text, addition, get_store(), _get_llm())
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"text": combined, "analysis": result.to_dict()}


# ── API: Generate ─────────────────────────────────────────────────────────

@app.post("/api/generate")
async def api_generate(request: Request):
    body = await _json_body(request)
    raw_config = body.get("config")
    if not isinstance(raw_config, dict):
        raise HTTPException(400, "config is required")
    try:
        config = config_from_request(raw_config)
    except ValueError as e:
        raise HTTPException(400, f"invalid config: {e}")

    missing = find_missing_fields(config)
    if missing:
        raise HTTPException(400, f"missing fields: {', '.join(missing)}")

    worksheet = await synthesize(config, get_store(), get_settings())
    if worksheet is None:
        return JSONResponse(status_code=422, content={"detail": CANNOT_GENERATE_MESSAGE})
    return worksheet.to_dict()
