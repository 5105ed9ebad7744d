"""Tests for recovering JSON from model replies."""
import pytest

from app.services.errors import JSONExtractionError
from app.services.json_extractor import extract_json


def test_plain_json_parses_directly():
    assert extract_json('{"patterns": [], "alerts": []}') == {"patterns": [], "alerts": []}


def test_fenced_block_is_used_when_text_surrounds_it():
    reply = 'Acá va el análisis:\n```json\n{"metrics": {"totalSessions": 2}}\n```\nSaludos'

    assert extract_json(reply) == {"metrics": {"totalSessions": 2}}


def test_fence_tag_is_case_insensitive():
    reply = 'Resultado:\n```JSON\n{"ok": true}\n```'

    assert extract_json(reply) == {"ok": True}


def test_brace_span_is_last_resort():
    reply = 'Claro, este es el resultado: {"trends": [{"metric": "BPM"}]} espero que sirva'

    assert extract_json(reply) == {"trends": [{"metric": "BPM"}]}


def test_invalid_fence_falls_back_to_brace_span():
    reply = '```json\nnot json\n``` then {"ok": 1}'

    assert extract_json(reply) == {"ok": 1}


def test_invalid_fence_and_invalid_brace_span_raise():
    reply = '```json\n{"broken": \n```\n trailing {"ok": 1}'

    # The brace span starts inside the fence, so it is invalid too.
    with pytest.raises(JSONExtractionError):
        extract_json(reply)


@pytest.mark.parametrize("reply", ["", "   ", "sin datos para analizar", "{not json}"])
def test_unparseable_replies_raise(reply):
    with pytest.raises(JSONExtractionError) as excinfo:
        extract_json(reply)

    assert "No valid JSON found" in excinfo.value.message


def test_extraction_error_is_a_value_error():
    with pytest.raises(ValueError):
        extract_json("nope")
