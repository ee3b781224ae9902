"""Prompt templates for LLM-based request analysis."""
from __future__ import annotations

ANALYSIS_PROMPT = """\
사용자의 영단어 문제지 제작 요청을 분석하세요: "{user_input}"

허용되는 학년 수준: [{grade_levels}]

분석 규칙:
1. 학년 수준(grade), 주제(topic), 특정 단어(words), 문제 수(count)를 추출하세요.
2. 학년은 반드시 허용되는 학년 수준 목록에서 선택하세요. 사용자가 "중학교"라고 하면 \
"Middle School", "초등 3학년"이면 "Elementary Grade 3-4" 등으로 매핑하세요.
3. 특정 단어가 여러 개이면 쉼표로 구분된 하나의 문자열로 반환하세요.
4. 문제 수는 1에서 100 사이의 정수입니다. 알 수 없는 항목은 null로 두세요.
5. 문제 내용은 만들지 마세요. 파라미터만 추출합니다.

다른 텍스트 없이 아래 JSON 형식으로만 응답하세요:
{{
  "grade": "Middle School",
  "topic": null,
  "words": "fragile, sturdy",
  "count": 5
}}
"""


def format_grade_levels(levels: list[str]) -> str:
    return ", ".join(levels)
