# cognivia/quiz_formatter.py
import logging
import re
from dataclasses import dataclass, field
from functools import reduce

logger = logging.getLogger(__name__)

# Header line that starts the answer key, e.g. "Answers:", "**Answer Key**", "## Answers"
ANSWERS_HEADER = re.compile(r"^[#*_\s]*answers?(?:\s+key)?[*_\s]*(?::.*)?$", re.IGNORECASE)

QUESTION_HEADER = re.compile(r"^(\d+)\.\s+(.+)$")

# Tried top to bottom, first match wins. Group 2 is the option text.
OPTION_PATTERNS = (
    ("paren", re.compile(r"^([A-Za-z])\)\s*(.+)$")),
    ("dot", re.compile(r"^([A-Za-z])\.\s+(.+)$")),
    ("bare", re.compile(r"^([A-Z])\s+(.+)$")),
    ("bullet_paren", re.compile(r"^[*\-]\s*([A-Za-z])\)\s*(.+)$")),
    ("bullet_dot", re.compile(r"^[*\-]\s*([A-Za-z])\.\s+(.+)$")),
    ("bullet_bare", re.compile(r"^[*\-]\s*([A-Z])\s+(.+)$")),
)

# Lower-case "a text" only counts when the letter is the next one expected
_LOWER_BARE_OPTION = re.compile(r"^(?:[*\-]\s*)?([a-z])\s+(.+)$")

# Options are labelled A..Z
MAX_OPTIONS = 26

_NUMBERED_ANSWER = re.compile(r"^(\d+)\s*[.)]\s*([A-Za-z])(?![A-Za-z])")
_BARE_ANSWER = re.compile(r"^([A-Za-z])[.)]?$")
_LETTER_PAIR_ANSWER = re.compile(r"^([A-Za-z])\s+(.+)$")


@dataclass(frozen=True)
class ParsedQuiz:
    """A quiz whose questions, options and answers line up one to one."""
    questions: tuple[str, ...]
    options: tuple[tuple[str, ...], ...]
    answers: tuple[str, ...]
    ok = True

    def to_dict(self) -> dict:
        return {
            "questions": list(self.questions),
            "options": [list(opts) for opts in self.options],
            "answers": list(self.answers),
        }


@dataclass(frozen=True)
class FormatFailure:
    """
    Returned instead of a ParsedQuiz when the text could not be turned into a
    consistent quiz. Only the observed counts are kept, never partial data:
    `answers` counts answers actually found, `empty_answers` the blank slots.
    """
    reason: str
    questions: int = 0
    options: int = 0
    answers: int = 0
    empty_answers: int = 0
    empty_options: int = 0
    ok = False

    def as_counts(self) -> dict:
        return {
            "questions": self.questions,
            "options": self.options,
            "answers": self.answers,
            "empty_answers": self.empty_answers,
            "empty_options": self.empty_options,
        }


FormatResult = ParsedQuiz | FormatFailure


def split_lines(text: str) -> list:
    """Split text into stripped, non-empty lines."""
    return [ln.strip() for ln in (text or "").splitlines() if ln.strip()]


def split_regions(text: str) -> tuple:
    """
    Split raw model output into (questions_region, answers_region) at the first
    "Answers" header line. The header itself belongs to neither region.
    """
    lines = (text or "").splitlines()
    for idx, line in enumerate(lines):
        if ANSWERS_HEADER.match(line.strip()):
            return "\n".join(lines[:idx]), "\n".join(lines[idx + 1:])
    return "\n".join(lines), ""


def match_option(line: str):
    """Return (pattern_name, option_text) for an option line, or None."""
    for name, pattern in OPTION_PATTERNS:
        m = pattern.match(line)
        if m:
            return name, m.group(2).strip()
    return None


def _match_lower_option(line: str, position: int):
    m = _LOWER_BARE_OPTION.match(line)
    if not m or position >= MAX_OPTIONS or m.group(1) != chr(ord("a") + position):
        return None
    return "lower_bare", m.group(2).strip()


@dataclass(frozen=True)
class _QuestionState:
    questions: tuple = ()
    options: tuple = ()
    current: str | None = None
    current_options: tuple = ()

    def close(self) -> "_QuestionState":
        if self.current is None:
            return self
        return _QuestionState(
            questions=self.questions + (self.current,),
            options=self.options + (self.current_options,),
        )


def _question_step(state: _QuestionState, line: str) -> _QuestionState:
    header = QUESTION_HEADER.match(line)
    if header:
        closed = state.close()
        return _QuestionState(closed.questions, closed.options, header.group(2).strip(), ())
    if state.current is None:
        return state
    option = match_option(line)
    if option is None:
        option = _match_lower_option(line, len(state.current_options))
    if option is None:
        # stray text under a question is skipped
        return state
    return _QuestionState(
        state.questions, state.options, state.current, state.current_options + (option[1],)
    )


def extract_questions(region: str) -> tuple:
    """
    Walk the questions region and return (questions, options).
    A question with no recognised option lines still gets an empty option list.
    """
    final = reduce(_question_step, split_lines(region), _QuestionState()).close()
    return list(final.questions), [list(opts) for opts in final.options]


@dataclass(frozen=True)
class _AnswerState:
    question_count: int
    answer_map: dict = field(default_factory=dict)

    def next_slot(self):
        """Lowest unfilled question number, or None once every slot has an answer."""
        if len(self.answer_map) >= self.question_count:
            return None
        for n in range(1, self.question_count + 1):
            if n not in self.answer_map:
                return n
        return None

    def assign(self, number: int, letter: str) -> "_AnswerState":
        return _AnswerState(self.question_count, {**self.answer_map, number: letter.upper()})


def _numbered_answer(state: _AnswerState, line: str):
    m = _NUMBERED_ANSWER.match(line)
    if not m:
        return None
    return state.assign(int(m.group(1)), m.group(2))


def _bare_answer(state: _AnswerState, line: str):
    m = _BARE_ANSWER.match(line)
    if not m:
        return None
    slot = state.next_slot()
    return state if slot is None else state.assign(slot, m.group(1))


def _letter_pair_answer(state: _AnswerState, line: str):
    m = _LETTER_PAIR_ANSWER.match(line)
    if not m:
        return None
    value = m.group(2).strip().upper()
    if len(value) != 1 or not value.isalpha():
        return None
    slot = state.next_slot()
    return state if slot is None else state.assign(slot, value)


# Tried top to bottom; a handler returns None when its pattern does not apply.
ANSWER_PATTERNS: tuple = (
    ("numbered", _numbered_answer),
    ("bare_letter", _bare_answer),
    ("letter_pair", _letter_pair_answer),
)


def _answer_step(state: _AnswerState, line: str) -> _AnswerState:
    for _name, handler in ANSWER_PATTERNS:
        updated = handler(state, line)
        if updated is not None:
            return updated
    return state


def extract_answers(region: str, question_count: int) -> list:
    """
    Build the answer list for questions 1..question_count from the answers
    region. Positions without an answer are left as "".
    """
    final = reduce(_answer_step, split_lines(region), _AnswerState(question_count))
    return [final.answer_map.get(n, "") for n in range(1, question_count + 1)]


def validate(questions: list, options: list, answers: list, strict_options: bool = False) -> FormatResult:
    """
    Assemble a ParsedQuiz if the three lists agree, else a FormatFailure.
    With strict_options, a question without options also fails. A question
    with more than MAX_OPTIONS options always fails, since it cannot be labelled.
    """
    empty_answers = sum(1 for a in answers if not a.strip())
    empty_options = sum(1 for opts in options if not opts)

    def fail(reason: str) -> FormatFailure:
        failure = FormatFailure(
            reason=reason,
            questions=len(questions),
            options=len(options),
            answers=len(answers) - empty_answers,
            empty_answers=empty_answers,
            empty_options=empty_options,
        )
        logger.warning("Quiz format validation failed (%s): %s", reason, failure.as_counts())
        return failure

    if not questions:
        return fail("no questions found")
    if not (len(questions) == len(options) == len(answers)):
        return fail("question, option and answer counts differ")
    if empty_answers:
        return fail("missing answers")
    if any(len(opts) > MAX_OPTIONS for opts in options):
        return fail("too many options")
    if strict_options and empty_options:
        return fail("questions without options")
    return ParsedQuiz(
        questions=tuple(questions),
        options=tuple(tuple(opts) for opts in options),
        answers=tuple(answers),
    )


def format_quiz(text: str, strict_options: bool = False) -> FormatResult:
    """
    Turn raw generator output into a ParsedQuiz, or a FormatFailure when the
    output is malformed. Never raises on bad input.
    """
    questions_region, answers_region = split_regions(text)
    questions, options = extract_questions(questions_region)
    answers = extract_answers(answers_region, len(questions))
    logger.debug(
        "Extracted %d questions, %d option lists, %d answers",
        len(questions), len(options), sum(1 for a in answers if a),
    )
    return validate(questions, options, answers, strict_options=strict_options)


def option_letter(index: int) -> str:
    """0 -> 'A', 1 -> 'B', ..."""
    if not 0 <= index < MAX_OPTIONS:
        raise ValueError(f"Option index out of range: {index}")
    return chr(ord("A") + index)


def render_quiz(quiz: ParsedQuiz) -> str:
    """Write a quiz back out in the numbered / lettered / Answers: layout."""
    lines = []
    for i, (question, opts) in enumerate(zip(quiz.questions, quiz.options), start=1):
        lines.append(f"{i}. {question}")
        lines.extend(f"{option_letter(j)}) {opt}" for j, opt in enumerate(opts))
        lines.append("")
    lines.append("Answers:")
    lines.extend(f"{i}. {ans}" for i, ans in enumerate(quiz.answers, start=1))
    return "\n".join(lines)
