"""Assemble worksheets from the pre-generated question bank (no LLM involved)."""
from __future__ import annotations

import logging
import random
import re
from typing import TYPE_CHECKING

from vocab_worksheet.models import GeneratorConfig, PoolItem, Question, VocabItem, Worksheet
from vocab_worksheet.parsers.question_parser import parse_pre_generated_question

if TYPE_CHECKING:
    from vocab_worksheet.dataset import VocabStore

_log = logging.getLogger("vocab_worksheet.qgen")

WORKSHEET_TYPE = "multiple-choice"
DEFAULT_COUNT = 10
PER_WORD_CAP = 2


def topic_keywords(topic: str) -> list[str]:
    return [k for k in re.split(r"[\s,]+", topic.lower()) if len(k) > 1]


def filter_by_topic(items: list[VocabItem], topic: str) -> list[VocabItem]:
    """Items whose text contains any of the topic's keywords."""
    keywords = topic_keywords(topic)
    return [
        v for v in items
        if any(kw in v.searchable_text() for kw in keywords)
    ]


def filter_by_words(items: list[VocabItem], requested: list[str]) -> list[VocabItem]:
    """Loose match: the item's word contains a requested word or vice versa."""
    return [
        v for v in items
        if any(rw in v.word.lower() or v.word.lower() in rw for rw in requested)
    ]


async def _find_words_in_other_levels(store: VocabStore, requested: list[str]) -> list[VocabItem]:
    word_levels = await store.get_word_levels()
    levels: list[str] = []
    for rw in requested:
        for level in word_levels.get(rw, []):
            if level not in levels:
                levels.append(level)

    found: list[VocabItem] = []
    for level in levels:
        data = await store.get_level(level)
        found.extend(v for v in data if v.word.lower() in requested)
    return found


async def resolve_candidates(config: GeneratorConfig, store: VocabStore) -> list[VocabItem]:
    """Vocabulary items a worksheet for *config* may draw from.

    Explicit words take priority over the topic.  Words absent from the
    requested level are looked up at whichever levels the word index lists.
    """
    level_vocab = await store.get_level(config.grade) if config.grade else []

    requested = config.requested_words()
    if requested:
        relevant = filter_by_words(level_vocab, requested)
        if not relevant:
            relevant = await _find_words_in_other_levels(store, requested)
        return relevant
    if config.topic:
        return filter_by_topic(level_vocab, config.topic)
    return list(level_vocab)


def collect_pool(items: list[VocabItem]) -> list[PoolItem]:
    pool: list[PoolItem] = []
    for v in items:
        for qtype, raw in v.pre_generated_questions.items():
            if raw:
                pool.append(PoolItem(word=v.word, meaning=v.meaning, question_type=qtype, raw=raw))
    return pool


def filter_by_types(pool: list[PoolItem], question_types: list[str] | None) -> list[PoolItem]:
    if not question_types:
        return pool
    wanted = set(question_types)
    return [p for p in pool if p.question_type in wanted]


def select_capped(shuffled: list[PoolItem], count: int, cap: int = PER_WORD_CAP) -> list[int]:
    """First pass: take items in order while each word stays under *cap*.

    Returns positions into *shuffled*.
    """
    per_word: dict[str, int] = {}
    selected: list[int] = []
    for i, item in enumerate(shuffled):
        if len(selected) >= count:
            break
        n = per_word.get(item.word, 0)
        if n < cap:
            selected.append(i)
            per_word[item.word] = n + 1
    return selected


def fill_uncapped(shuffled: list[PoolItem], selected: list[int], count: int) -> list[int]:
    """Second pass: top up to *count* with any unused items, ignoring the cap."""
    result = list(selected)
    taken = set(selected)
    for i in range(len(shuffled)):
        if len(result) >= count:
            break
        if i not in taken:
            result.append(i)
            taken.add(i)
    return result


def select_questions(
    pool: list[PoolItem],
    count: int,
    cap: int = PER_WORD_CAP,
    rng: random.Random | None = None,
) -> list[PoolItem]:
    shuffled = list(pool)
    (rng or random).shuffle(shuffled)

    chosen = select_capped(shuffled, count, cap)
    if len(chosen) < count:
        chosen = fill_uncapped(shuffled, chosen, count)
    return [shuffled[i] for i in chosen]


def build_questions(items: list[PoolItem]) -> list[Question]:
    questions: list[Question] = []
    for i, item in enumerate(items, 1):
        parsed = parse_pre_generated_question(item.raw, item.word, item.meaning, item.question_type)
        questions.append(Question(
            id=i,
            question=parsed.question,
            options=parsed.options,
            answer=parsed.answer,
            explanation=parsed.explanation,
        ))
    return questions


def worksheet_title(config: GeneratorConfig) -> str:
    return f"{config.grade or ''} - {config.topic or config.words or '영단어'} 문제지"


async def generate_worksheet(
    config: GeneratorConfig,
    store: VocabStore,
    per_word_cap: int = PER_WORD_CAP,
    default_count: int = DEFAULT_COUNT,
) -> Worksheet | None:
    """Build a worksheet for *config*, or ``None`` when the bank has nothing usable."""
    candidates = await resolve_candidates(config, store)
    with_questions = [v for v in candidates if v.pre_generated_questions]
    if not with_questions:
        _log.info("No vocabulary with questions for %s", worksheet_title(config))
        return None

    pool = filter_by_types(collect_pool(with_questions), config.question_types)
    if not pool:
        _log.info("Question pool empty (type filter: %s)", config.question_types)
        return None

    count = config.count or default_count
    selected = select_questions(pool, count, per_word_cap)
    questions = build_questions(selected)
    if not questions:
        return None

    _log.info("Selected %d/%d questions from %d words",
              len(questions), len(pool), len(with_questions))
    return Worksheet(
        title=worksheet_title(config),
        grade=config.grade or "",
        topic=config.topic or config.words or "",
        type=WORKSHEET_TYPE,
        questions=questions,
        words_used=list(dict.fromkeys(item.word for item in selected)),
    )
