"""
Name: Response Contract Unit Tests

Responsibilities:
  - Validate JSON extraction from raw model output (strict + span stages)
  - Validate schema enforcement (keys, types, confidence range)
  - Validate the canonical insufficient-information response
"""

import json

import pytest

from grounded_rag.application.response_contract import (
    INSUFFICIENT_INFORMATION_ANSWER,
    RagResponse,
    extract_json_object,
    insufficient_information_response,
    parse_rag_response,
)
from grounded_rag.crosscutting.exceptions import ResponseParseError, SchemaViolation


@pytest.mark.unit
class TestExtractJsonObject:
    def test_plain_object(self):
        assert extract_json_object('  {"a": 1}\n') == {"a": 1}

    def test_object_wrapped_in_prose_and_fences(self):
        raw = 'Sure! Here it is:\n```json\n{"a": {"b": 2}}\n```\nThanks.'
        assert extract_json_object(raw) == {"a": {"b": 2}}

    @pytest.mark.parametrize("raw", ["", "no json here", "} backwards {"])
    def test_missing_object_raises_parse_error(self, raw):
        with pytest.raises(ResponseParseError):
            extract_json_object(raw)

    def test_invalid_json_raises_parse_error(self):
        with pytest.raises(ResponseParseError) as exc_info:
            extract_json_object('{"a": 1,}')

        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)

    def test_deeply_nested_json_raises_parse_error(self):
        """R: Nesting beyond the recursion limit is a parse failure, not a crash."""
        raw = '{"answer": ' + "[" * 200_000 + "]" * 200_000 + "}"

        with pytest.raises(ResponseParseError) as exc_info:
            extract_json_object(raw)

        assert isinstance(exc_info.value.original_error, RecursionError)


@pytest.mark.unit
class TestParseRagResponse:
    def test_valid_output(self, model_output_factory):
        response = parse_rag_response(model_output_factory(confidence=1))

        assert isinstance(response, RagResponse)
        assert response.confidence_score == 1.0
        assert response.source_documents[0].page_or_section == "chunk 1"

    def test_wire_format_uses_camel_case(self, model_output_factory):
        wire = parse_rag_response(model_output_factory()).to_wire()

        assert set(wire) == {
            "answer",
            "sourceDocuments",
            "confidenceScore",
            "recommendation",
        }
        assert set(wire["sourceDocuments"][0]) == {"name", "pageOrSection", "excerpt"}

    def test_extra_top_level_key_is_schema_violation(self, model_output_factory):
        with pytest.raises(SchemaViolation) as exc_info:
            parse_rag_response(model_output_factory(debug="leak"))

        assert type(exc_info.value) is SchemaViolation
        assert "debug" in exc_info.value.message

    @pytest.mark.parametrize("confidence", [1.5, -0.1, "0.9", True, None])
    def test_bad_confidence(self, model_output_factory, confidence):
        with pytest.raises(SchemaViolation):
            parse_rag_response(model_output_factory(confidence=confidence))

    def test_missing_key(self):
        raw = json.dumps({"answer": "x", "sourceDocuments": [], "recommendation": "y"})

        with pytest.raises(SchemaViolation, match="confidenceScore"):
            parse_rag_response(raw)

    def test_source_document_with_extra_key(self):
        raw = json.dumps(
            {
                "answer": "x",
                "sourceDocuments": [
                    {"name": "a", "pageOrSection": "b", "excerpt": "c", "page": 1}
                ],
                "confidenceScore": 0.5,
                "recommendation": "y",
            }
        )
        with pytest.raises(SchemaViolation):
            parse_rag_response(raw)

    def test_non_string_answer(self, model_output_factory):
        with pytest.raises(SchemaViolation):
            parse_rag_response(model_output_factory(answer=42))

    def test_json_array_is_schema_violation(self):
        with pytest.raises(SchemaViolation):
            parse_rag_response("[{}]")


@pytest.mark.unit
class TestInsufficientInformation:
    def test_canonical_response(self):
        response = insufficient_information_response()

        assert response.answer == INSUFFICIENT_INFORMATION_ANSWER
        assert response.source_documents == []
        assert response.confidence_score == 0
        assert response.recommendation
