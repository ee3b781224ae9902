"""Entry points of the worksheet pipeline: analyze a request, then synthesize."""
from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from vocab_worksheet.extractor import (
    REFINED_READY_MESSAGE,
    analyze_offline,
    combine_refinement,
    feedback_for,
    refine_quick,
)
from vocab_worksheet.models import AnalysisResult, GeneratorConfig, Worksheet
from vocab_worksheet.remote_extractor import analyze_with_llm
from vocab_worksheet.validator import validate_words_in_data
from vocab_worksheet.worksheet_generator import DEFAULT_COUNT, PER_WORD_CAP, generate_worksheet

if TYPE_CHECKING:
    from vocab_worksheet.config import Settings
    from vocab_worksheet.dataset import VocabStore
    from vocab_worksheet.providers.base import LLMProvider


async def extract(text: str, llm: LLMProvider | None = None) -> AnalysisResult:
    if not text.strip():
        raise ValueError("request text is empty")
    if llm is None:
        return analyze_offline(text)
    return await analyze_with_llm(llm, text)


async def resolve_and_validate(result: AnalysisResult, store: VocabStore) -> AnalysisResult:
    return await validate_words_in_data(result, store)


async def refine(
    result: AnalysisResult,
    field: str,
    value,
    store: VocabStore,
) -> AnalysisResult:
    """Apply a quick-select change, re-checking word data when it can change.

    A new grade or word list starts over from a clean data check, so a
    request blocked by a level mismatch recovers once the grade is fixed.
    """
    refined = refine_quick(result, field, value)
    if field not in ("grade", "words"):
        return refined
    missing = refined.missing_fields
    refined = replace(
        refined,
        is_complete=not missing,
        data_exists=True,
        feedback_message=REFINED_READY_MESSAGE if not missing else feedback_for(missing),
        matched_words=[],
        mismatched_words={},
    )
    return await resolve_and_validate(refined, store)


async def analyze_request(
    text: str,
    store: VocabStore,
    llm: LLMProvider | None = None,
) -> AnalysisResult:
    result = await extract(text, llm)
    return await resolve_and_validate(result, store)


async def reanalyze(
    original: str,
    addition: str,
    store: VocabStore,
    llm: LLMProvider | None = None,
) -> tuple[str, AnalysisResult]:
    """Re-run analysis on the original request plus a follow-up.

    Returns the combined text (the new "original" for further follow-ups)
    and its analysis.
    """
    if not addition.strip():
        raise ValueError("follow-up text is empty")
    combined = combine_refinement(original, addition)
    return combined, await analyze_request(combined, store, llm)


async def synthesize(
    config: GeneratorConfig,
    store: VocabStore,
    settings: Settings | None = None,
) -> Worksheet | None:
    cap = settings.per_word_cap if settings else PER_WORD_CAP
    default_count = settings.default_count if settings else DEFAULT_COUNT
    return await generate_worksheet(config, store, per_word_cap=cap, default_count=default_count)
