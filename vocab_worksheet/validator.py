"""Check requested words against the master word index.

Shared by the offline and LLM analyzers: whichever produced the
parameters, the same checks run before a worksheet can be generated.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vocab_worksheet.levels import to_level_korean
from vocab_worksheet.models import AnalysisResult

if TYPE_CHECKING:
    from vocab_worksheet.dataset import VocabStore

log = logging.getLogger("vocab_worksheet.analysis")


def partition_words(
    requested: list[str],
    word_levels: dict[str, list[str]],
) -> tuple[list[str], list[str]]:
    unique = list(dict.fromkeys(requested))
    found = [w for w in unique if w in word_levels]
    missing = [w for w in unique if w not in word_levels]
    return found, missing


def find_level_mismatches(
    found: list[str],
    word_levels: dict[str, list[str]],
    grade: str,
) -> dict[str, list[str]]:
    """Words that exist in the index but not at *grade*, with their real levels."""
    return {
        w: list(word_levels[w])
        for w in found
        if grade not in word_levels[w]
    }


def mismatch_message(mismatched: dict[str, list[str]], grade: str) -> str:
    details = " ".join(
        f"'{word}'은(는) {', '.join(to_level_korean(l) for l in levels)} 레벨의 단어입니다."
        for word, levels in mismatched.items()
    )
    return (
        f"{details} {to_level_korean(grade)} 레벨에 해당하지 않습니다. "
        "다른 단어를 입력하거나 레벨을 변경해주세요."
    )


async def validate_words_in_data(result: AnalysisResult, store: VocabStore) -> AnalysisResult:
    """Mark *result* as lacking data when its words are unknown or off-level.

    Topic-only requests pass through untouched; their data is only checked
    when the question pool is assembled.  A grade mismatch on some (but not
    all) of the found words is tolerated and reported in
    ``mismatched_words``.
    """
    config = result.extracted
    if not config.words:
        return result

    word_levels = await store.get_word_levels()
    requested = config.requested_words()
    found, missing = partition_words(requested, word_levels)
    result.matched_words = found

    if not found:
        log.info("No requested words in the index: %s", config.words)
        result.data_exists = False
        result.is_complete = False
        result.feedback_message = (
            f"해당 단어({config.words})가 마스터 데이터에 없습니다. 다른 단어를 입력해주세요."
        )
        return result

    if missing:
        log.info("Unknown words ignored: %s", ", ".join(missing))

    if config.grade:
        mismatched = find_level_mismatches(found, word_levels, config.grade)
        result.mismatched_words = mismatched
        if mismatched and len(mismatched) == len(found):
            result.data_exists = False
            result.is_complete = False
            result.feedback_message = mismatch_message(mismatched, config.grade)
            return result
        result.matched_words = [w for w in found if w not in mismatched]

    result.data_exists = True
    return result
