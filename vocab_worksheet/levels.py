"""Grade levels and question-type labels shared by the dataset and the pipeline."""
from __future__ import annotations

import re

GRADE_LEVELS = [
    "Elementary Grade 1-2",
    "Elementary Grade 3-4",
    "Elementary Grade 5-6",
    "Middle School",
    "High School",
    "TOEFL/IELTS",
]

LEVEL_KOREAN = {
    "Elementary Grade 1-2": "초등 1-2학년",
    "Elementary Grade 3-4": "초등 3-4학년",
    "Elementary Grade 5-6": "초등 5-6학년",
    "Middle School": "중학교",
    "High School": "고등학교",
    "TOEFL/IELTS": "TOEFL/IELTS",
}

# Column order of the master vocabulary table
QUESTION_TYPE_NAMES = [
    "음소(Phonics)",
    "그림/사진",
    "단어 듣고 한글 뜻 고르기",
    "철자 맞추기",
    "문맥 속 어휘의 뜻 - 한글",
    "문맥 속 어휘의 뜻 - 영어",
    "객관식 문장완성하기",
    "유의어찾기",
    "반의어찾기",
    "문맥 속 의미 추론",
    "콜로케이션(Collocation)",
]


def to_level_korean(level: str) -> str:
    return LEVEL_KOREAN.get(level, level)


def level_filename(level: str) -> str:
    """Dataset file holding one level, e.g. ``vocab-middle-school.json``."""
    slug = re.sub(r"[^a-z0-9]+", "-", level.lower())
    return f"vocab-{slug}.json"
