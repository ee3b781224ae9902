"""Tests for LLM-backed request analysis."""
from __future__ import annotations

import json

import pytest

from vocab_worksheet.extractor import READY_MESSAGE
from vocab_worksheet.remote_extractor import (
    MAX_RETRIES,
    _extract_json,
    analyze_with_llm,
    coerce_extracted,
)


class FakeLLM:
    """Replays canned responses; raises if given an exception instance."""

    def __init__(self, responses=None):
        self._responses = responses or []
        self.prompts: list[str] = []

    async def generate(self, prompt: str, temperature: float = 0.0) -> str:
        idx = min(len(self.prompts), len(self._responses) - 1)
        self.prompts.append(prompt)
        response = self._responses[idx]
        if isinstance(response, Exception):
            raise response
        return response

    def name(self) -> str:
        return "fake-llm"


SCENARIO_A = "중학교 수준으로 fragile 단어를 넣어서 5문제 만들어줘"


class TestExtractJson:
    def test_plain(self):
        assert _extract_json('{"grade": "Middle School"}') == {"grade": "Middle School"}

    def test_think_block_and_fence(self):
        text = '<think>maybe {"grade": "x"}</think>\n```json\n{"count": 5}\n```'
        assert _extract_json(text) == {"count": 5}

    def test_last_object_wins(self):
        text = 'first {"a": 1} then {"b": {"c": 2}} done'
        assert _extract_json(text) == {"b": {"c": 2}}

    def test_braces_inside_strings(self):
        assert _extract_json('Result: {"topic": "x}y"}') == {"topic": "x}y"}

    def test_no_json(self):
        assert _extract_json("I cannot help with that.") is None
        assert _extract_json("{broken") is None


class TestCoerce:
    def test_valid(self):
        c = coerce_extracted({"grade": "Middle School", "topic": None, "words": "fragile", "count": 5})
        assert (c.grade, c.topic, c.words, c.count) == ("Middle School", None, "fragile", 5)

    def test_grade_outside_levels_dropped(self):
        assert coerce_extracted({"grade": "중학교"}).grade is None

    @pytest.mark.parametrize("raw,expected", [
        ("7", 7),
        (500, None),
        (0, None),
        (True, None),
        ("many", None),
    ])
    def test_count(self, raw, expected):
        assert coerce_extracted({"count": raw}).count == expected

    def test_word_list_joined(self):
        assert coerce_extracted({"words": ["fragile", "sturdy"]}).words == "fragile, sturdy"

    def test_null_strings(self):
        c = coerce_extracted({"topic": "null", "words": "  "})
        assert c.topic is None
        assert c.words is None

    def test_extracted_wrapper(self):
        c = coerce_extracted({"extracted": {"grade": "High School", "topic": "환경"}, "isComplete": False})
        assert c.grade == "High School"
        assert c.topic == "환경"


class TestAnalyzeWithLLM:
    @pytest.mark.asyncio
    async def test_complete(self):
        llm = FakeLLM([json.dumps({"grade": "Middle School", "topic": None, "words": "fragile", "count": 5})])
        r = await analyze_with_llm(llm, SCENARIO_A)
        assert r.is_complete
        assert r.missing_fields == []
        assert r.feedback_message == READY_MESSAGE
        assert SCENARIO_A in llm.prompts[0]
        assert "Middle School" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_missing_fields_computed_locally(self):
        llm = FakeLLM(['{"grade": null, "topic": null, "words": "fragile", "count": null}'])
        r = await analyze_with_llm(llm, "fragile")
        assert r.missing_fields == ["grade", "count"]
        assert not r.is_complete
        assert "학년 수준, 문제 수" in r.feedback_message

    @pytest.mark.asyncio
    async def test_retry_after_bad_json(self):
        llm = FakeLLM(["Sure! Here you go.", '{"grade": "High School", "topic": "환경", "count": 10}'])
        r = await analyze_with_llm(llm, "고등학교 환경 주제로 10문제")
        assert r.extracted.grade == "High School"
        assert len(llm.prompts) == 2
        assert "did not contain valid JSON" in llm.prompts[1]

    @pytest.mark.asyncio
    async def test_falls_back_after_retries(self):
        llm = FakeLLM(["nope"])
        r = await analyze_with_llm(llm, SCENARIO_A)
        assert len(llm.prompts) == MAX_RETRIES
        # offline analyzer result
        assert r.extracted.grade == "Middle School"
        assert r.extracted.words == "fragile"
        assert r.extracted.count == 5

    @pytest.mark.asyncio
    async def test_falls_back_on_provider_error(self):
        llm = FakeLLM([ConnectionError("refused")])
        r = await analyze_with_llm(llm, SCENARIO_A)
        assert len(llm.prompts) == 1
        assert r.is_complete
        assert r.extracted.count == 5
