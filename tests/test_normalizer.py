import json

import pytest

from citation_chat.domain.errors import MalformedResponse
from citation_chat.domain.models import Citation, LineRange
from citation_chat.gateway import normalizer
from citation_chat.gateway.normalizer import PayloadShape, normalize_response


def test_flat_shape_with_trailing_stray_byte():
    raw = '{"text":"hi","sourceDocuments":[{"pageContent":"A","metadata":{"source":"doc1"}}]}%'
    payload = normalize_response(raw)
    assert payload.text == "hi"
    assert payload.citations == (Citation(text="A", source_label="doc1"),)
    assert payload.is_fallback is False


def test_nested_shape_drops_null_documents():
    raw = '{"text":"hi","agentReasoning":[{"sourceDocuments":[null, {"pageContent":"B","metadata":{"source":"doc2"}}]}]}'
    payload = normalize_response(raw)
    assert payload.citations == (Citation(text="B", source_label="doc2"),)


def test_nested_shape_concatenates_steps_in_order():
    data = {
        "text": "answer",
        "agentReasoning": [
            {"sourceDocuments": [{"pageContent": "one", "metadata": {"source": "a"}}]},
            {"agentName": "no docs"},
            None,
            {"sourceDocuments": None},
            {"sourceDocuments": [{"pageContent": "", "metadata": {"source": "b"}}, {"pageContent": "two", "metadata": {"source": "c"}}]},
        ],
    }
    payload = normalize_response(json.dumps(data))
    assert [c.text for c in payload.citations] == ["one", "two"]
    assert [c.source_label for c in payload.citations] == ["a", "c"]


def test_line_range_and_missing_source():
    data = {
        "text": "t",
        "sourceDocuments": [
            {"pageContent": "with lines", "metadata": {"source": "guide.md", "loc": {"lines": {"from": 3, "to": 9}}}},
            {"pageContent": "no metadata"},
        ],
    }
    payload = normalize_response(json.dumps(data))
    assert payload.citations[0].line_range == LineRange(start=3, end=9)
    assert payload.citations[0].caption() == "guide.md (Lines 3-9)"
    assert payload.citations[1].source_label == normalizer.UNKNOWN_SOURCE
    assert payload.citations[1].line_range is None


def test_missing_text_yields_empty_text():
    payload = normalize_response('{"sourceDocuments": []}')
    assert payload.text == ""
    assert payload.citations == ()


def test_double_encoded_body():
    inner = json.dumps({"text": "nested", "sourceDocuments": [{"pageContent": "X", "metadata": {"source": "s"}}]})
    payload = normalize_response(json.dumps(inner))
    assert payload.text == "nested"
    assert payload.citations[0].text == "X"


def test_bytes_body_and_control_character():
    payload = normalize_response(b'{"text": "ok"}\x00')
    assert payload.text == "ok"


@pytest.mark.parametrize("raw", ["not json at all", "[1, 2, 3]", "", '{"text": "cut'])
def test_malformed_bodies_raise(raw):
    with pytest.raises(MalformedResponse):
        normalize_response(raw)


def test_classify_shape_prefers_flat_documents():
    data = {"sourceDocuments": [{"pageContent": "a"}], "agentReasoning": [{"sourceDocuments": [{"pageContent": "b"}]}]}
    assert normalizer.classify_shape(data) is PayloadShape.FLAT
    assert normalizer.classify_shape({"sourceDocuments": [], "agentReasoning": [{}]}) is PayloadShape.NESTED
    assert normalizer.classify_shape({"text": "only"}) is PayloadShape.TEXT_ONLY


def test_strip_trailing_artifact_keeps_valid_endings():
    assert normalizer.strip_trailing_artifact('{"a": 1}') == '{"a": 1}'
    assert normalizer.strip_trailing_artifact('{"a": 1}%') == '{"a": 1}'
    assert normalizer.strip_trailing_artifact('{"a": 1}%\n') == '{"a": 1}'


@pytest.mark.parametrize("stray", ["}", "]", '"', "1", "e", "l", "%", "\x1e"])
def test_any_single_stray_byte_is_tolerated(stray):
    raw = '{"text":"hi","sourceDocuments":[{"pageContent":"A","metadata":{"source":"doc1"}}]}' + stray
    payload = normalize_response(raw)
    assert payload.text == "hi"
    assert payload.citations == (Citation(text="A", source_label="doc1"),)


def test_two_stray_bytes_are_malformed():
    with pytest.raises(MalformedResponse):
        normalize_response('{"text":"hi"}%%')


def test_flat_list_of_nulls_falls_through_to_reasoning_steps():
    data = {
        "text": "hi",
        "sourceDocuments": [None, None],
        "agentReasoning": [{"sourceDocuments": [{"pageContent": "B", "metadata": {"source": "doc2"}}]}],
    }
    payload = normalize_response(json.dumps(data))
    assert payload.citations == (Citation(text="B", source_label="doc2"),)
