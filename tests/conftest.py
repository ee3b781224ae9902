"""Shared test fixtures."""
from __future__ import annotations

import json

import pytest

from vocab_worksheet.dataset import FileSource, VocabStore
from vocab_worksheet.levels import level_filename
from vocab_worksheet.models import GeneratorConfig, VocabItem

FRAGILE_SYNONYM = "Q: The glass is ___.\nA) fragile\nB) heavy\nC) loud\nD) soft\nAnswer: A"
FRAGILE_ANTONYM = (
    "Q: Which word is the opposite of 'fragile'?\n"
    "A. sturdy\nB. weak\nC. thin\nD. delicate\nAnswer: A"
)
FRAGILE_SPELLING = "Choose the correct spelling:\nA) fragil  B) fragile  C) fraggile  D) frajile\nAnswer: B"


def _item(word, meaning, level, definition="", example="", questions=None, types=None):
    questions = questions or {}
    return VocabItem(
        word=word,
        parts_of_speech="adj",
        meaning=meaning,
        english_definition=definition,
        example=example,
        synonyms_antonyms="",
        level=level,
        cefr_level="B1",
        korean_curriculum="중1",
        question_types=types if types is not None else list(questions),
        pre_generated_questions=questions,
    )


def _mcq(stem: str, options: list[str], answer: str = "A") -> str:
    lines = [f"Q: {stem}"] + [f"{chr(65 + i)}) {o}" for i, o in enumerate(options)]
    return "\n".join(lines + [f"Answer: {answer}"])


@pytest.fixture
def sample_vocab():
    """Vocabulary per level; a few words carry no usable questions."""
    return {
        "Middle School": [
            _item("fragile", "깨지기 쉬운", "Middle School",
                  definition="easily broken", example="The vase is fragile.",
                  questions={
                      "유의어찾기": FRAGILE_SYNONYM,
                      "반의어찾기": FRAGILE_ANTONYM,
                      "철자 맞추기": FRAGILE_SPELLING,
                  }),
            _item("sturdy", "튼튼한", "Middle School",
                  definition="strongly built", example="A sturdy table.",
                  questions={
                      "유의어찾기": _mcq("A ___ bridge can hold heavy trucks.", ["sturdy", "weak", "thin", "soft"]),
                      "반의어찾기": _mcq("The opposite of 'sturdy' is ___.", ["strong", "flimsy", "solid", "firm"], "B"),
                  }),
            _item("pollution", "오염", "Middle School",
                  definition="harmful substances in the environment",
                  example="Air pollution is a big problem.",
                  questions={
                      "문맥 속 어휘의 뜻 - 영어": _mcq("Factories cause ___.", ["pollution", "music", "joy", "sleep"]),
                      "객관식 문장완성하기": _mcq("We must reduce ___ in cities.", ["rain", "pollution", "trees", "books"], "B"),
                  }),
            _item("quiet", "조용한", "Middle School",
                  definition="making little noise", types=["유의어찾기"]),
        ],
        "High School": [
            _item("ubiquitous", "어디에나 있는", "High School",
                  definition="present everywhere",
                  questions={
                      "유의어찾기": _mcq("Smartphones are ___ today.", ["ubiquitous", "rare", "ancient", "hidden"]),
                      "반의어찾기": _mcq("The opposite of 'ubiquitous' is ___.", ["common", "scarce", "global", "usual"], "B"),
                  }),
        ],
        "Elementary Grade 3-4": [
            _item("apple", "사과", "Elementary Grade 3-4",
                  definition="a round red fruit",
                  questions={"그림/사진": _mcq("Which one is a fruit?", ["apple", "car", "desk", "pen"])}),
            _item("dog", "개", "Elementary Grade 3-4",
                  definition="an animal that barks",
                  questions={"그림/사진": _mcq("Which animal barks?", ["cat", "dog", "bird", "fish"], "B")}),
        ],
    }


@pytest.fixture
def dataset_dir(tmp_path, sample_vocab):
    """Write the four dataset documents into a temporary directory."""
    index = {}
    table = []
    word_index = []
    for level, items in sample_vocab.items():
        name = level_filename(level)
        (tmp_path / name).write_text(
            json.dumps([v.to_dict() for v in items], ensure_ascii=False), encoding="utf-8",
        )
        index[level] = {"file": name, "count": len(items)}
        table.extend(v.to_dict(include_questions=False) for v in items)
        word_index.extend({"w": v.word, "l": level} for v in items)
    (tmp_path / "vocab-index.json").write_text(json.dumps(index), encoding="utf-8")
    (tmp_path / "vocab-table.json").write_text(json.dumps(table, ensure_ascii=False), encoding="utf-8")
    (tmp_path / "vocab-word-index.json").write_text(json.dumps(word_index), encoding="utf-8")
    return tmp_path


@pytest.fixture
def store(dataset_dir):
    return VocabStore(FileSource(dataset_dir))


@pytest.fixture
def empty_store(tmp_path):
    """A store pointing at a directory with no dataset files."""
    return VocabStore(FileSource(tmp_path / "missing"))


@pytest.fixture
def middle_school_config():
    return GeneratorConfig(grade="Middle School", words="fragile", count=3)
