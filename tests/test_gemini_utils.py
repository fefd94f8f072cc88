"""
Tests for cognivia.gemini_utils

The google.generativeai calls are monkeypatched; nothing reaches the network.
"""
import pytest

from cognivia import gemini_utils
from cognivia.gemini_utils import build_document_prompt, build_topic_prompt, configure_gemini, gemini_generate


def test_configure_without_key_raises(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        configure_gemini()


def test_configure_passes_key(monkeypatch):
    seen = {}
    monkeypatch.setattr(gemini_utils.genai, "configure", lambda api_key: seen.update(key=api_key))
    configure_gemini("abc")
    assert seen == {"key": "abc"}


def test_generate_returns_response_text(monkeypatch):
    class FakeResponse:
        text = "1. Q?\nA) x\nAnswers:\n1. A"

    class FakeModel:
        def __init__(self, name):
            self.name = name

        def generate_content(self, prompt):
            return FakeResponse()

    monkeypatch.setattr(gemini_utils.genai, "GenerativeModel", FakeModel)
    assert gemini_generate("prompt").startswith("1. Q?")


def test_generate_missing_text_is_empty(monkeypatch):
    class FakeModel:
        def __init__(self, name):
            pass

        def generate_content(self, prompt):
            return object()

    monkeypatch.setattr(gemini_utils.genai, "GenerativeModel", FakeModel)
    assert gemini_generate("prompt") == ""


def test_prompts_describe_answer_section():
    topic_prompt = build_topic_prompt("Volcanoes", 7)
    doc_prompt = build_document_prompt("Some notes", 3)
    assert "7-question" in topic_prompt and "Volcanoes" in topic_prompt
    assert "3-question" in doc_prompt and "Some notes" in doc_prompt
    assert "Answers:" in topic_prompt and "Answers:" in doc_prompt
