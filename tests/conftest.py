import pytest

from cognivia.quiz_store import QuizStore

SAMPLE_QUIZ_TEXT = """Here is your quiz:

1. What is 2+2?
A) 3
B) 4
C) 5
D) 22

2. Which planet is known as the Red Planet?
A) Venus
B) Jupiter
C) Mars
D) Mercury

Answers:
1. B
2. C
"""


@pytest.fixture
def sample_quiz_text():
    """Well-formed two-question model output."""
    return SAMPLE_QUIZ_TEXT


@pytest.fixture
def store(tmp_path):
    """QuizStore backed by a temporary folder."""
    return QuizStore(tmp_path / "quizzes")
