"""
Tests for cognivia.quiz_service

The model is replaced by a plain function returning canned text, so no
network access is needed.
"""
import pytest

from cognivia.config import Settings
from cognivia.quiz_service import (
    UNTITLED_TOPIC,
    QuizGenerationError,
    generate_quiz_from_document,
    generate_quiz_from_topic,
)

LONG_TEXT = "Photosynthesis converts light energy into chemical energy in plants. " * 3


def fake_model(output):
    prompts = []

    def generate(prompt):
        prompts.append(prompt)
        return output

    generate.prompts = prompts
    return generate


def test_topic_quiz_is_formatted_and_saved(store, sample_quiz_text):
    generate = fake_model(sample_quiz_text)
    record = generate_quiz_from_topic("  Space  ", "u1", store, generate=generate)

    assert record.topic == "Space"
    assert record.user_id == "u1"
    assert record.answers == ["B", "C"]
    assert store.get_quiz(record.id) == record
    assert "Topic: Space" in generate.prompts[0]
    assert "Answers:" in generate.prompts[0]


def test_topic_prompt_uses_configured_question_count(store, sample_quiz_text):
    generate = fake_model(sample_quiz_text)
    generate_quiz_from_topic("Space", "u1", store, settings=Settings(question_count=5), generate=generate)
    assert "5-question" in generate.prompts[0]


@pytest.mark.parametrize("topic, user_id", [("", "u1"), ("   ", "u1"), ("Space", "")])
def test_topic_quiz_requires_topic_and_user(store, topic, user_id):
    with pytest.raises(ValueError, match="required"):
        generate_quiz_from_topic(topic, user_id, store, generate=fake_model("unused"))


def test_invalid_format_raises_and_saves_nothing(store):
    raw = "1. Q?\nA) x\nB) y"
    with pytest.raises(QuizGenerationError) as excinfo:
        generate_quiz_from_topic("Space", "u1", store, generate=fake_model(raw))

    assert excinfo.value.raw_output == raw
    assert excinfo.value.failure.empty_answers == 1
    assert store.list_quizzes() == []


def test_empty_model_output_raises(store):
    with pytest.raises(QuizGenerationError, match="Failed to generate"):
        generate_quiz_from_topic("Space", "u1", store, generate=fake_model("  "))


def test_strict_options_setting_is_applied(store):
    raw = "1. Open?\nAnswers:\n1. A"
    with pytest.raises(QuizGenerationError):
        generate_quiz_from_topic("Space", "u1", store, settings=Settings(strict_options=True), generate=fake_model(raw))


def test_document_quiz_topic_from_filename(store, sample_quiz_text):
    generate = fake_model(sample_quiz_text)
    record = generate_quiz_from_document(LONG_TEXT, "u1", store, filename="notes/biology.pdf", generate=generate)
    assert record.topic == "biology"
    assert "Photosynthesis converts light energy" in generate.prompts[0]


def test_document_quiz_without_filename_is_untitled(store, sample_quiz_text):
    record = generate_quiz_from_document(LONG_TEXT, "u1", store, generate=fake_model(sample_quiz_text))
    assert record.topic == UNTITLED_TOPIC


def test_document_markup_is_stripped_before_prompting(store, sample_quiz_text):
    generate = fake_model(sample_quiz_text)
    html = f"<p>{LONG_TEXT}</p><img src='diagram.png'>"
    generate_quiz_from_document(html, "u1", store, generate=generate)
    assert "<p>" not in generate.prompts[0]
    assert "diagram.png" not in generate.prompts[0]


def test_document_too_short_is_rejected(store):
    with pytest.raises(ValueError, match="too short"):
        generate_quiz_from_document("<b>tiny</b>", "u1", store, generate=fake_model("unused"))


def test_document_requires_user(store):
    with pytest.raises(ValueError, match="required"):
        generate_quiz_from_document(LONG_TEXT, "", store, generate=fake_model("unused"))
