from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class VocabItem:
    word: str
    parts_of_speech: str = ""
    meaning: str = ""
    english_definition: str = ""
    example: str = ""
    synonyms_antonyms: str = ""
    level: str = ""
    cefr_level: str = ""
    korean_curriculum: str = ""
    question_types: list[str] = field(default_factory=list)
    # question-type label -> raw author-written question text
    pre_generated_questions: dict[str, str] = field(default_factory=dict)

    def searchable_text(self) -> str:
        return " ".join([
            self.word,
            self.meaning,
            self.english_definition,
            self.example,
            self.synonyms_antonyms,
        ]).lower()

    @classmethod
    def from_dict(cls, d: dict) -> VocabItem:
        return cls(
            word=str(d.get("word", "")),
            parts_of_speech=d.get("partsOfSpeech", "") or "",
            meaning=d.get("meaning", "") or "",
            english_definition=d.get("englishDefinition", "") or "",
            example=d.get("example", "") or "",
            synonyms_antonyms=d.get("synonymsAntonyms", "") or "",
            level=d.get("level", "") or "",
            cefr_level=d.get("cefrLevel", "") or "",
            korean_curriculum=d.get("koreanCurriculum", "") or "",
            question_types=list(d.get("questionTypes") or []),
            pre_generated_questions=dict(d.get("preGeneratedQuestions") or {}),
        )

    def to_dict(self, include_questions: bool = True) -> dict:
        d = {
            "word": self.word,
            "partsOfSpeech": self.parts_of_speech,
            "meaning": self.meaning,
            "englishDefinition": self.english_definition,
            "example": self.example,
            "synonymsAntonyms": self.synonyms_antonyms,
            "level": self.level,
            "cefrLevel": self.cefr_level,
            "koreanCurriculum": self.korean_curriculum,
            "questionTypes": list(self.question_types),
        }
        if include_questions:
            d["preGeneratedQuestions"] = dict(self.pre_generated_questions)
        return d


@dataclass
class WordLevel:
    word: str
    level: str

    @classmethod
    def from_dict(cls, d: dict) -> WordLevel:
        return cls(word=str(d.get("w", "")), level=str(d.get("l", "")))


@dataclass
class GeneratorConfig:
    grade: str | None = None
    topic: str | None = None
    words: str | None = None  # comma-separated
    count: int | None = None
    question_types: list[str] | None = None

    def requested_words(self) -> list[str]:
        if not self.words:
            return []
        return [w.strip().lower() for w in self.words.split(",") if w.strip()]

    @classmethod
    def from_dict(cls, d: dict) -> GeneratorConfig:
        types = d.get("questionTypes")
        return cls(
            grade=d.get("grade") or None,
            topic=d.get("topic") or None,
            words=d.get("words") or None,
            count=d.get("count") or None,
            question_types=list(types) if types else None,
        )

    def to_dict(self) -> dict:
        d = {
            "grade": self.grade,
            "topic": self.topic,
            "words": self.words,
            "count": self.count,
        }
        if self.question_types is not None:
            d["questionTypes"] = list(self.question_types)
        return d


@dataclass
class AnalysisResult:
    extracted: GeneratorConfig
    is_complete: bool
    data_exists: bool
    missing_fields: list[str]
    feedback_message: str
    # Filled in by the validator when explicit words were requested
    matched_words: list[str] = field(default_factory=list)
    mismatched_words: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict) -> AnalysisResult:
        return cls(
            extracted=GeneratorConfig.from_dict(d.get("extracted") or {}),
            is_complete=bool(d.get("isComplete", False)),
            data_exists=bool(d.get("dataExists", True)),
            missing_fields=list(d.get("missingFields") or []),
            feedback_message=d.get("feedbackMessage", "") or "",
            matched_words=list(d.get("matchedWords") or []),
            mismatched_words=dict(d.get("mismatchedWords") or {}),
        )

    def to_dict(self) -> dict:
        return {
            "extracted": self.extracted.to_dict(),
            "isComplete": self.is_complete,
            "dataExists": self.data_exists,
            "missingFields": list(self.missing_fields),
            "feedbackMessage": self.feedback_message,
            "matchedWords": list(self.matched_words),
            "mismatchedWords": {w: list(ls) for w, ls in self.mismatched_words.items()},
        }


@dataclass
class PoolItem:
    word: str
    meaning: str
    question_type: str
    raw: str


@dataclass
class Question:
    id: int
    question: str
    answer: str
    explanation: str
    options: list[str] | None = None

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "explanation": self.explanation,
        }
        if self.options is not None:
            d["options"] = list(self.options)
        return d


@dataclass
class Worksheet:
    title: str
    grade: str
    topic: str
    type: str
    questions: list[Question]
    words_used: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "grade": self.grade,
            "topic": self.topic,
            "type": self.type,
            "questions": [q.to_dict() for q in self.questions],
            "wordsUsed": list(self.words_used),
        }
