"""Offline request analyzer.

Pulls worksheet parameters out of a Korean/English request without calling
an LLM.  Supported inputs look like:

  "중학교 수준으로 happy, sad 단어를 넣어서 5문제 만들어줘"
  "초등 3학년 environment 10문제"
  "고등학교 academic success 주제로 15문항"
  "fragile 3문제"

Grade, count, words and topic are detected independently from ordered
pattern tables; the first matching entry of each table wins.
"""
from __future__ import annotations

import re
from dataclasses import replace

from vocab_worksheet.levels import GRADE_LEVELS
from vocab_worksheet.models import AnalysisResult, GeneratorConfig

MAX_COUNT = 100

# Most specific first: a numbered elementary grade beats bare "초등".
GRADE_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"초등?\s*[1-2]|초\s*[1-2]\s*학년|elementary\s*(grade\s*)?[1-2]", re.IGNORECASE),
     "Elementary Grade 1-2"),
    (re.compile(r"초등?\s*[3-4]|초\s*[3-4]\s*학년|elementary\s*(grade\s*)?[3-4]", re.IGNORECASE),
     "Elementary Grade 3-4"),
    (re.compile(r"초등?\s*[5-6]|초\s*[5-6]\s*학년|elementary\s*(grade\s*)?[5-6]", re.IGNORECASE),
     "Elementary Grade 5-6"),
    (re.compile(r"초등학교|초등|elementary", re.IGNORECASE), "Elementary Grade 3-4"),
    (re.compile(r"중학교|중학|중등|중\s*[1-3]\s*학년|middle\s*school", re.IGNORECASE), "Middle School"),
    (re.compile(r"고등학교|고등|고교|고\s*[1-3]\s*학년|high\s*school", re.IGNORECASE), "High School"),
    (re.compile(r"toefl|ielts|토플|아이엘츠", re.IGNORECASE), "TOEFL/IELTS"),
]

COUNT_PATTERNS: list[re.Pattern] = [
    re.compile(r"(\d+)\s*(?:문제|문항|개|questions?)", re.IGNORECASE),
    re.compile(r"(?:문제|문항)\s*(\d+)"),
]

TOPIC_PATTERNS: list[re.Pattern] = [
    re.compile(r"(?:주제|테마|토픽|관련|대한)\s*[:：]?\s*([가-힣a-zA-Z\s]{2,}?)"
               r"(?:\s*(?:으로|로|에서|문제|만들|넣어|$))"),
    re.compile(r"([가-힣]{2,})\s*(?:주제|관련)\s*(?:으로|로)?"),
]

WORD_TOKEN = re.compile(r"[a-zA-Z]{2,}")

# Latin tokens that are never vocabulary requests
EXCLUDED_ENGLISH = frozenset({
    "ai", "pdf", "toefl", "ielts", "cefr", "ok", "hwp",
    "the", "and", "for", "with", "from", "that", "this", "all",
    "are", "was", "were", "been", "have", "has", "had", "not",
    "but", "can", "will", "would", "should", "could", "may",
    "elementary", "middle", "school", "high", "grade",
    "question", "questions",
})

NON_TOPIC_WORDS = frozenset({
    "수준", "으로", "만들어", "넣어", "줘", "해줘", "주세요",
    "문제", "단어", "학교", "학년", "중학교", "고등학교", "초등학교",
})

FIELD_NAMES = {
    "grade": "학년 수준",
    "topic": "주제 또는 특정 단어",
    "count": "문제 수",
}

READY_MESSAGE = "✅ 분석 완료! 모든 정보가 준비되었습니다. 아래 버튼을 눌러 문제를 제작하세요."
REFINED_READY_MESSAGE = "모든 정보가 준비되었습니다! 아래 버튼을 눌러 문제를 제작하세요."

REFINABLE_FIELDS = ("grade", "topic", "words", "count", "question_types")


def detect_grade(text: str) -> str | None:
    for pattern, level in GRADE_PATTERNS:
        if pattern.search(text):
            return level
    return None


def detect_count(text: str) -> int | None:
    for pattern in COUNT_PATTERNS:
        m = pattern.search(text)
        if m:
            n = int(m.group(1))
            if 0 < n <= MAX_COUNT:
                return n
    return None


def detect_words(text: str) -> str | None:
    seen: set[str] = set()
    words: list[str] = []
    for token in WORD_TOKEN.findall(text):
        key = token.lower()
        if key in EXCLUDED_ENGLISH or key in seen:
            continue
        seen.add(key)
        words.append(token)
    return ", ".join(words) if words else None


def detect_topic(text: str) -> str | None:
    for pattern in TOPIC_PATTERNS:
        m = pattern.search(text)
        if m:
            candidate = m.group(1).strip()
            if len(candidate) >= 2 and candidate not in NON_TOPIC_WORDS:
                return candidate
    return None


def find_missing_fields(config: GeneratorConfig) -> list[str]:
    missing: list[str] = []
    if not config.grade:
        missing.append("grade")
    if not config.words and not config.topic:
        missing.append("topic")
    if not config.count:
        missing.append("count")
    return missing


def feedback_for(missing: list[str]) -> str:
    if not missing:
        return READY_MESSAGE
    names = ", ".join(FIELD_NAMES.get(f, f) for f in missing)
    return f"📋 분석 결과: {names}이(가) 필요합니다. 아래에서 선택하거나 추가로 입력해주세요."


def analyze_offline(text: str) -> AnalysisResult:
    config = GeneratorConfig(
        grade=detect_grade(text),
        topic=detect_topic(text),
        words=detect_words(text),
        count=detect_count(text),
    )
    missing = find_missing_fields(config)
    return AnalysisResult(
        extracted=config,
        is_complete=not missing,
        data_exists=True,  # checked later by the validator
        missing_fields=missing,
        feedback_message=feedback_for(missing),
    )


def normalize_field(field: str, value):
    """Check one user-supplied parameter; empty values become ``None``.

    Raises ValueError for unknown fields and out-of-contract values.
    """
    if field not in REFINABLE_FIELDS:
        raise ValueError(f"Unknown field: {field}")
    if value is None or value == "":
        return None
    if field == "grade":
        if value not in GRADE_LEVELS:
            raise ValueError(f"Unknown grade level: {value}")
        return value
    if field in ("topic", "words"):
        if not isinstance(value, str):
            raise ValueError(f"{field} must be a string")
        return value.strip() or None
    if field == "count":
        if not isinstance(value, int) or isinstance(value, bool) or not 0 < value <= MAX_COUNT:
            raise ValueError(f"count must be an integer in 1..{MAX_COUNT}")
        return value
    if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
        raise ValueError("question_types must be a list of strings")
    return list(value) or None


def config_from_request(d: dict) -> GeneratorConfig:
    """Build a GeneratorConfig from client JSON, rejecting invalid values."""
    if not isinstance(d, dict):
        raise ValueError("config must be an object")
    return GeneratorConfig(
        grade=normalize_field("grade", d.get("grade")),
        topic=normalize_field("topic", d.get("topic")),
        words=normalize_field("words", d.get("words")),
        count=normalize_field("count", d.get("count")),
        question_types=normalize_field("question_types", d.get("questionTypes")),
    )


def refine_quick(result: AnalysisResult, field: str, value) -> AnalysisResult:
    """Fill in one parameter and recompute completeness.

    Returns a new result; *result* is left untouched.  Word data is not
    re-checked here; see ``analysis.refine``.
    """
    extracted = replace(result.extracted, **{field: normalize_field(field, value)})
    missing = find_missing_fields(extracted)
    ready = not missing and result.data_exists
    return replace(
        result,
        extracted=extracted,
        is_complete=ready,
        missing_fields=missing,
        feedback_message=REFINED_READY_MESSAGE if ready else result.feedback_message,
    )


def combine_refinement(original: str, addition: str) -> str:
    """Text to re-submit when the user adds to a previous request."""
    return f"{original} + 추가 요청: {addition}"
