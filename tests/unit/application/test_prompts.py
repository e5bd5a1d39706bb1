"""
Name: Prompt Builders Unit Tests

Responsibilities:
  - Validate the user prompt embeds the literal question and JSON excerpts
  - Validate excerpt sanitization and the repair prompt
"""

import json

import pytest

from grounded_rag.application.prompts import (
    RAG_SYSTEM_PROMPT,
    build_repair_prompt,
    build_user_prompt,
    sanitize_excerpt,
)


def _excerpts_from(prompt: str):
    start = prompt.index("[", prompt.index("PROVIDED DOCUMENT EXCERPTS"))
    value, _ = json.JSONDecoder().raw_decode(prompt, start)
    return value


@pytest.mark.unit
class TestSystemPrompt:
    def test_declares_contract_and_injection_rules(self):
        assert '"sourceDocuments"' in RAG_SYSTEM_PROMPT
        assert "confidenceScore" in RAG_SYSTEM_PROMPT
        assert "UNTRUSTED DATA" in RAG_SYSTEM_PROMPT
        assert "verbatim" in RAG_SYSTEM_PROMPT


@pytest.mark.unit
class TestBuildUserPrompt:
    def test_embeds_question_and_excerpts_as_json(self):
        excerpts = [
            {"name": "Policy", "pageOrSection": "chunk 1", "excerpt": "Días: tres."},
            {"name": "Guide", "pageOrSection": "chunk 2", "excerpt": 'Say "hi".'},
        ]

        prompt = build_user_prompt("  How many days?  ", excerpts)

        assert "USER QUESTION:\nHow many days?\n" in prompt
        assert _excerpts_from(prompt) == excerpts
        assert "Días: tres." in prompt

    def test_question_with_braces_is_literal(self):
        prompt = build_user_prompt("What is {excerpts_json}?", [])

        assert "What is {excerpts_json}?" in prompt
        assert _excerpts_from(prompt) == []

    def test_blank_question_raises(self):
        with pytest.raises(ValueError):
            build_user_prompt("   ", [])


@pytest.mark.unit
class TestSanitizeExcerpt:
    def test_removes_nul_and_trims(self):
        assert sanitize_excerpt("  a\x00b  ") == "ab"

    def test_truncates_and_retrims(self):
        assert sanitize_excerpt("abcd efgh", max_chars=5) == "abcd"

    def test_short_text_unchanged(self):
        assert sanitize_excerpt("short", max_chars=1200) == "short"


@pytest.mark.unit
class TestBuildRepairPrompt:
    def test_appends_instruction_and_invalid_output(self):
        repaired = build_repair_prompt("ORIGINAL PROMPT", "not json {")

        assert repaired.startswith("ORIGINAL PROMPT\n\n")
        assert "Your previous response was invalid." in repaired
        assert "Return ONLY a valid JSON object" in repaired
        assert repaired.endswith("INVALID RESPONSE (for reference):\nnot json {")
