# cognivia/quiz_service.py
import logging
import os
from typing import Callable, Optional

from .config import Settings
from .extract_text import sanitize_prompt
from .gemini_utils import build_document_prompt, build_topic_prompt, gemini_generate
from .quiz_formatter import FormatFailure, ParsedQuiz, format_quiz
from .quiz_store import QuizRecord, QuizStore

logger = logging.getLogger(__name__)

UNTITLED_TOPIC = "Untitled Quiz"


class QuizGenerationError(Exception):
    """
    The model returned nothing, or returned text that did not format into a
    quiz. raw_output and failure are kept so the caller can show them.
    """

    def __init__(self, message: str, raw_output: Optional[str] = None, failure: Optional[FormatFailure] = None):
        super().__init__(message)
        self.raw_output = raw_output
        self.failure = failure


def _generate_and_format(prompt: str, settings: Settings, generate: Optional[Callable[[str], str]]) -> ParsedQuiz:
    if generate is None:
        raw = gemini_generate(prompt, model_name=settings.gemini_model)
    else:
        raw = generate(prompt)
    if not raw or not raw.strip():
        raise QuizGenerationError("Failed to generate quiz content")

    result = format_quiz(raw, strict_options=settings.strict_options)
    if isinstance(result, FormatFailure):
        logger.warning("Generated quiz could not be formatted: %s", result.reason)
        raise QuizGenerationError("The generated quiz format was invalid", raw_output=raw, failure=result)
    return result


def _save(quiz: ParsedQuiz, user_id: str, topic: str, store: QuizStore) -> QuizRecord:
    data = quiz.to_dict()
    record = QuizRecord(
        user_id=user_id,
        topic=topic,
        questions=data["questions"],
        options=data["options"],
        answers=data["answers"],
    )
    return store.save_quiz(record)


def generate_quiz_from_topic(
    topic: str,
    user_id: str,
    store: QuizStore,
    settings: Optional[Settings] = None,
    generate: Optional[Callable[[str], str]] = None,
) -> QuizRecord:
    """
    Ask the model for a quiz about topic, format it and save it for user_id.
    Nothing is saved when formatting fails.
    """
    settings = settings or Settings()
    if not topic or not topic.strip() or not user_id:
        raise ValueError("Topic and user id are required")

    topic = topic.strip()
    logger.info("Generating %d-question quiz on %r for %s", settings.question_count, topic, user_id)
    quiz = _generate_and_format(build_topic_prompt(topic, settings.question_count), settings, generate)
    return _save(quiz, user_id, topic, store)


def generate_quiz_from_document(
    text: str,
    user_id: str,
    store: QuizStore,
    filename: Optional[str] = None,
    settings: Optional[Settings] = None,
    generate: Optional[Callable[[str], str]] = None,
) -> QuizRecord:
    """
    Same as generate_quiz_from_topic but the prompt is built from document text.
    The quiz topic is the file name without its extension.
    """
    settings = settings or Settings()
    if not text or not user_id:
        raise ValueError("Text content and user id are required")

    content = sanitize_prompt(text)
    if len(content) < settings.min_document_chars:
        raise ValueError(
            f"Text content is too short (minimum {settings.min_document_chars} characters required)"
        )

    topic = os.path.splitext(os.path.basename(filename))[0] if filename else ""
    topic = topic or UNTITLED_TOPIC
    logger.info("Generating quiz from document %r (%d chars) for %s", topic, len(content), user_id)
    quiz = _generate_and_format(build_document_prompt(content, settings.question_count), settings, generate)
    return _save(quiz, user_id, topic, store)
