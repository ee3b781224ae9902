"""Parse author-written question text into a stem, options and an answer.

The raw text comes straight from the master vocabulary table and is only
loosely formatted.  Two option layouts are recognised:

  Q: The glass is ___.          Q: Choose the article: ___ apple
  A) fragile                    A) a  B) an  C) the  D) some
  B) heavy                      Answer: B
  C) loud
  D) soft
  Answer: A

Text matching neither layout, or whose answer letter names no option, still
yields a question with no options and the bare answer letter.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

ANSWER_RE = re.compile(r"Answer[:\s]*([A-D])", re.IGNORECASE)
ANSWER_LINE_RE = re.compile(r"\n?\s*Answer[:\s]*[A-D]\s*$", re.IGNORECASE)
Q_PREFIX_RE = re.compile(r"^Q:\s*", re.IGNORECASE)
OPTION_LINE_RE = re.compile(r"(?:^|\n)\s*([A-D])[.)]\s*(.+)")
SINGLE_LINE_RE = re.compile(r"A[.)]\s*.+?(?:\s{2,}|\s+)B[.)]\s*.+")
SINGLE_LINE_SPLIT_RE = re.compile(r"\s+(?=[B-D][.)]\s)")
OPTION_MARKER_RE = re.compile(r"^[A-D][.)]\s*")


@dataclass
class ParsedQuestion:
    question: str
    options: list[str] | None
    answer: str
    explanation: str


def _extract_multiline_options(text: str) -> tuple[str, list[str]] | None:
    matches = list(OPTION_LINE_RE.finditer(text))
    if len(matches) < 2:
        return None
    stem = text[:matches[0].start()].strip()
    return stem, [m.group(2).strip() for m in matches]


def _extract_single_line_options(text: str) -> tuple[str, list[str]] | None:
    m = SINGLE_LINE_RE.search(text)
    if not m:
        return None
    line = m.group(0)
    stem = text[:m.start()].strip()
    options = [OPTION_MARKER_RE.sub("", part).strip() for part in SINGLE_LINE_SPLIT_RE.split(line)]
    return stem, options


def explanation_for(word: str, meaning: str, question_type: str) -> str:
    return f"'{word}'의 뜻은 '{meaning}'입니다. (문제 유형: {question_type})"


def parse_pre_generated_question(
    raw: str,
    word: str,
    meaning: str,
    question_type: str,
) -> ParsedQuestion:
    m = ANSWER_RE.search(raw)
    letter = m.group(1).upper() if m else ""

    text = ANSWER_LINE_RE.sub("", raw).strip()
    text = Q_PREFIX_RE.sub("", text).strip()

    stem = text
    options: list[str] = []
    extracted = _extract_multiline_options(text) or _extract_single_line_options(text)
    if extracted:
        stem, options = extracted

    index = ord(letter) - ord("A") if letter else -1
    if 0 <= index < len(options):
        answer = options[index]
    else:
        # Answer must be one of the options; drop them when it can't be
        answer = letter
        options = []

    return ParsedQuestion(
        question=stem,
        options=options or None,
        answer=answer,
        explanation=explanation_for(word, meaning, question_type),
    )
