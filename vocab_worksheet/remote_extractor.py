"""Request analysis through an LLM provider.

The model only extracts parameters; completeness and feedback are computed
locally with the same rules as the offline analyzer so both produce the
same contract.  Any failure falls back to the offline analyzer.
"""
from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING

from vocab_worksheet.extractor import MAX_COUNT, analyze_offline, feedback_for, find_missing_fields
from vocab_worksheet.levels import GRADE_LEVELS
from vocab_worksheet.models import AnalysisResult, GeneratorConfig
from vocab_worksheet.prompts import ANALYSIS_PROMPT, format_grade_levels

if TYPE_CHECKING:
    from vocab_worksheet.providers.base import LLMProvider

_log = logging.getLogger("vocab_worksheet.analysis")

MAX_RETRIES = 3


def _extract_json(text: str) -> dict | None:
    """Pull the JSON object out of an LLM reply.

    ``<think>`` blocks are dropped first.  A code-fenced object is preferred;
    otherwise the last balanced ``{…}`` block that decodes wins.
    """
    text = re.sub(r"<think>.*?</think>", "", text, flags=re.DOTALL).strip()

    m = re.search(r"```(?:json)?\s*\n?({.*?})\s*\n?```", text, re.DOTALL)
    if m:
        try:
            return json.loads(m.group(1))
        except json.JSONDecodeError:
            pass

    for candidate in reversed(_find_json_objects(text)):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    return None


def _find_json_objects(text: str) -> list[str]:
    """Balanced top-level ``{…}`` substrings of *text*."""
    results: list[str] = []
    depth = 0
    start = -1
    in_str = False
    escape = False
    for i, ch in enumerate(text):
        if in_str:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"' and depth > 0:
            in_str = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                results.append(text[start:i + 1])
    return results


def _clean_str(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value)
    value = str(value).strip()
    if not value or value.lower() in ("null", "none"):
        return None
    return value


def _clean_count(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and 0 < value <= MAX_COUNT:
        return value
    return None


def coerce_extracted(data: dict) -> GeneratorConfig:
    """Turn a model's JSON into a GeneratorConfig, dropping values outside the contract."""
    # Accept the full AnalysisResult shape as well as the bare parameters
    if isinstance(data.get("extracted"), dict):
        data = data["extracted"]
    grade = _clean_str(data.get("grade"))
    if grade not in GRADE_LEVELS:
        grade = None
    return GeneratorConfig(
        grade=grade,
        topic=_clean_str(data.get("topic")),
        words=_clean_str(data.get("words")),
        count=_clean_count(data.get("count")),
    )


def result_from_config(config: GeneratorConfig) -> AnalysisResult:
    missing = find_missing_fields(config)
    return AnalysisResult(
        extracted=config,
        is_complete=not missing,
        data_exists=True,
        missing_fields=missing,
        feedback_message=feedback_for(missing),
    )


async def analyze_with_llm(llm: LLMProvider, text: str) -> AnalysisResult:
    base_prompt = ANALYSIS_PROMPT.format(
        user_input=text,
        grade_levels=format_grade_levels(GRADE_LEVELS),
    )
    prompt = base_prompt
    for attempt in range(MAX_RETRIES):
        try:
            _log.info("Analyze via %s (attempt %d/%d)", llm.name(), attempt + 1, MAX_RETRIES)
            response = await llm.generate(prompt, temperature=0.0)
        except Exception as e:
            _log.warning("LLM analysis failed (%s), using offline analyzer", e)
            return analyze_offline(text)

        data = _extract_json(response)
        if data is None:
            _log.info("  No valid JSON, feeding back")
            _log.debug("  Raw response: %.300s", response)
            prompt = base_prompt + "\n\nYour response did not contain valid JSON. Respond with ONLY a JSON object."
            continue
        return result_from_config(coerce_extracted(data))

    _log.warning("LLM analysis gave no usable JSON after %d attempts, using offline analyzer",
                 MAX_RETRIES)
    return analyze_offline(text)
