from dataclasses import dataclass


@dataclass(frozen=True)
class GradeReport:
    score: int
    total: int
    percentage: float
    correct: tuple


def _normalize_choice(choice) -> str:
    """'b', ' B ', 'B) 4' -> 'B'; None or blank -> ''."""
    if not choice:
        return ""
    return str(choice).strip()[:1].upper()


def grade_quiz(answers: list, responses: list) -> GradeReport:
    """
    Compare a student's chosen letters against the answer key.
    Unanswered questions (None or blank) count as wrong.
    """
    if len(answers) != len(responses):
        raise ValueError(f"Expected {len(answers)} responses, got {len(responses)}")
    correct = tuple(
        bool(key) and _normalize_choice(resp) == key.strip().upper()
        for key, resp in zip(answers, responses)
    )
    score = sum(correct)
    total = len(answers)
    percentage = round(score / total * 100, 2) if total else 0.0
    return GradeReport(score=score, total=total, percentage=percentage, correct=correct)
