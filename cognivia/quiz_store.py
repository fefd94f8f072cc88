# cognivia/quiz_store.py
import json
import logging
import math
import random
import string
import time
import uuid
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
UNKNOWN_TOPIC = "Unknown"


class StoreError(Exception):
    """Raised when a stored quiz or result file cannot be read."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_quiz_id() -> str:
    """quiz_<epoch ms>_<9 base36 chars>"""
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"quiz_{int(time.time() * 1000)}_{suffix}"


@dataclass
class QuizRecord:
    user_id: str
    topic: str
    questions: list
    options: list
    answers: list
    id: str = field(default_factory=new_quiz_id)
    created_at: str = field(default_factory=_now)
    is_taken: bool = False
    score: float = 0


@dataclass
class ResultRecord:
    user_id: str
    quiz_id: str
    score: float
    total: int
    percentage: float
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=_now)


class QuizStore:
    """
    Keeps quizzes and results as JSON files in one folder:
    quiz_<id>.json and result_<id>.json.
    """

    def __init__(self, folder):
        self.folder = Path(folder)
        # a stray file where the folder should be is moved out of the way
        if self.folder.exists() and not self.folder.is_dir():
            self.folder.rename(self.folder.with_name(self.folder.name + "_bak"))
        self.folder.mkdir(parents=True, exist_ok=True)

    def _quiz_path(self, quiz_id: str) -> Path:
        return self.folder / f"quiz_{quiz_id}.json"

    def _result_path(self, result_id: str) -> Path:
        return self.folder / f"result_{result_id}.json"

    def _read(self, path: Path) -> dict:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read {path.name}: {e}") from e

    def _write(self, path: Path, obj: dict):
        path.write_text(json.dumps(obj, indent=2), encoding="utf-8")

    def save_quiz(self, record: QuizRecord) -> QuizRecord:
        self._write(self._quiz_path(record.id), asdict(record))
        logger.info("Saved quiz %s for user %s (%d questions)", record.id, record.user_id, len(record.questions))
        return record

    def get_quiz(self, quiz_id: str) -> QuizRecord | None:
        path = self._quiz_path(quiz_id)
        if not path.exists():
            return None
        return QuizRecord(**self._read(path))

    def list_quizzes(self, user_id: str | None = None) -> list:
        """Saved quizzes, newest first, optionally only those owned by user_id."""
        records = [QuizRecord(**self._read(p)) for p in self.folder.glob("quiz_*.json")]
        if user_id is not None:
            records = [r for r in records if r.user_id == user_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def delete_quiz(self, quiz_id: str) -> bool:
        path = self._quiz_path(quiz_id)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Deleted quiz %s", quiz_id)
        return True

    def save_result(self, result: ResultRecord) -> ResultRecord:
        """Store a result and mark its quiz as taken with that score."""
        quiz = self.get_quiz(result.quiz_id)
        if quiz is None:
            raise StoreError(f"Unknown quiz: {result.quiz_id}")
        self._write(self._result_path(result.id), asdict(result))
        quiz.is_taken = True
        quiz.score = result.score
        self._write(self._quiz_path(quiz.id), asdict(quiz))
        return result

    def list_results(self, user_id: str | None = None) -> list:
        records = [ResultRecord(**self._read(p)) for p in self.folder.glob("result_*.json")]
        if user_id is not None:
            records = [r for r in records if r.user_id == user_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def performance_summary(self, user_id: str, limit: int = 5) -> dict:
        """
        Totals for a user's results: number taken, rounded average percentage,
        most-taken topics and the latest scores. Results whose quiz is gone are
        filed under "Unknown".
        """
        results = self.list_results(user_id)
        topics = {}
        for r in results:
            if r.quiz_id not in topics:
                quiz = self.get_quiz(r.quiz_id)
                topics[r.quiz_id] = (quiz.topic if quiz else "") or UNKNOWN_TOPIC

        total = len(results)
        # half-up, so 50.5 -> 51
        average = math.floor(sum(r.percentage or 0 for r in results) / total + 0.5) if total else 0
        counts = Counter(topics[r.quiz_id] for r in results)
        return {
            "total_quizzes": total,
            "average_score": average,
            "top_topics": [{"topic": t, "count": c} for t, c in counts.most_common(limit)],
            "recent_scores": [
                {
                    "topic": topics[r.quiz_id],
                    "score": r.score or 0,
                    "percentage": r.percentage or 0,
                    "date": r.created_at,
                }
                for r in results[:limit]
            ],
        }
