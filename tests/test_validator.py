"""Tests for word validation against the master word index."""
from __future__ import annotations

import pytest

from vocab_worksheet.extractor import analyze_offline
from vocab_worksheet.models import AnalysisResult, GeneratorConfig
from vocab_worksheet.validator import (
    find_level_mismatches,
    mismatch_message,
    partition_words,
    validate_words_in_data,
)


def _result(**kw) -> AnalysisResult:
    return AnalysisResult(
        extracted=GeneratorConfig(**kw),
        is_complete=True,
        data_exists=True,
        missing_fields=[],
        feedback_message="ok",
    )


class TestHelpers:
    def test_partition(self):
        index = {"fragile": ["Middle School"], "sturdy": ["Middle School"]}
        found, missing = partition_words(["fragile", "zzz", "fragile"], index)
        assert found == ["fragile"]
        assert missing == ["zzz"]

    def test_mismatches(self):
        index = {"fragile": ["Middle School"], "ubiquitous": ["High School", "TOEFL/IELTS"]}
        assert find_level_mismatches(["fragile", "ubiquitous"], index, "Middle School") == {
            "ubiquitous": ["High School", "TOEFL/IELTS"],
        }

    def test_mismatch_message_korean_levels(self):
        msg = mismatch_message({"ubiquitous": ["High School"]}, "Middle School")
        assert "'ubiquitous'은(는) 고등학교 레벨의 단어입니다." in msg
        assert "중학교 레벨에 해당하지 않습니다" in msg


class TestValidateWordsInData:
    @pytest.mark.asyncio
    async def test_scenario_word_exists_at_grade(self, store):
        r = analyze_offline("중학교 수준으로 fragile 단어를 넣어서 5문제 만들어줘")
        r = await validate_words_in_data(r, store)
        assert r.is_complete
        assert r.data_exists
        assert r.matched_words == ["fragile"]
        assert r.mismatched_words == {}

    @pytest.mark.asyncio
    async def test_scenario_word_at_other_level(self, store):
        r = await validate_words_in_data(_result(grade="Middle School", words="ubiquitous", count=5), store)
        assert r.data_exists is False
        assert r.is_complete is False
        assert "ubiquitous" in r.feedback_message
        assert "고등학교" in r.feedback_message
        assert r.mismatched_words == {"ubiquitous": ["High School"]}

    @pytest.mark.asyncio
    async def test_unknown_words(self, store):
        r = await validate_words_in_data(_result(grade="Middle School", words="zebra, qwerty", count=5), store)
        assert r.data_exists is False
        assert r.is_complete is False
        assert "zebra, qwerty" in r.feedback_message
        assert "마스터 데이터에 없습니다" in r.feedback_message

    @pytest.mark.asyncio
    async def test_partial_mismatch_tolerated(self, store):
        r = await validate_words_in_data(
            _result(grade="Middle School", words="fragile, ubiquitous", count=5), store,
        )
        assert r.data_exists is True
        assert r.is_complete is True
        assert r.matched_words == ["fragile"]
        assert r.mismatched_words == {"ubiquitous": ["High School"]}

    @pytest.mark.asyncio
    async def test_case_insensitive(self, store):
        r = await validate_words_in_data(_result(grade="Middle School", words=" Fragile ", count=5), store)
        assert r.data_exists
        assert r.matched_words == ["fragile"]

    @pytest.mark.asyncio
    async def test_no_grade_accepts_any_level(self, store):
        r = await validate_words_in_data(_result(words="ubiquitous", count=5), store)
        assert r.data_exists
        assert r.matched_words == ["ubiquitous"]

    @pytest.mark.asyncio
    async def test_topic_only_untouched(self, store):
        r = _result(grade="Middle School", topic="우주", count=5)
        out = await validate_words_in_data(r, store)
        assert out is r
        assert out.data_exists
        assert out.feedback_message == "ok"

    @pytest.mark.asyncio
    async def test_missing_dataset_means_no_data(self, empty_store):
        r = await validate_words_in_data(_result(grade="Middle School", words="fragile", count=5), empty_store)
        assert r.data_exists is False
        assert "vocab-word-index.json" in empty_store.unavailable
