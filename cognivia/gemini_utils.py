# cognivia/gemini_utils.py
import logging
import os

from dotenv import load_dotenv
import google.generativeai as genai

from .config import DEFAULT_MODEL

# load .env if present
load_dotenv()

logger = logging.getLogger(__name__)

QUIZ_FORMAT_RULES = """Format each question with its number followed by a period (1., 2., etc.) and the question text.
List four options, each on a new line, starting with the option letter (A, B, C, D) followed by a parenthesis and the option text.
After all questions, add a line "Answers:" and then one line per question giving the question number, a period and the correct letter (for example "1. B")."""


def configure_gemini(api_key: str | None = None):
    """
    Configure google.generativeai with an API key.
    Reads GEMINI_API_KEY from environment if api_key not provided.
    """
    key = api_key or os.environ.get("GEMINI_API_KEY")
    if not key:
        raise RuntimeError("GEMINI_API_KEY not set. Set environment variable or pass it to configure_gemini().")
    genai.configure(api_key=key)


def gemini_generate(prompt: str, model_name: str = DEFAULT_MODEL) -> str:
    """
    Send prompt to Gemini and return plain text response.
    """
    model = genai.GenerativeModel(model_name)
    response = model.generate_content(prompt)
    text = getattr(response, "text", "") or ""
    logger.debug("Gemini returned %d characters", len(text))
    return text


def build_topic_prompt(topic: str, num_questions: int = 10) -> str:
    """Prompt for a multiple-choice quiz about a free-text topic."""
    return f"""Generate a {num_questions}-question multiple-choice quiz on the following topic.
{QUIZ_FORMAT_RULES}

Topic: {topic}
"""


def build_document_prompt(content: str, num_questions: int = 10) -> str:
    """Prompt for a multiple-choice quiz based on extracted document text."""
    return f"""Generate a {num_questions}-question multiple-choice quiz based on the following content.
{QUIZ_FORMAT_RULES}

Content:
{content}
"""
