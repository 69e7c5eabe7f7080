"""
Failure Lab - Symptom Quiz.

============================================================
PURPOSE
============================================================
Stateless symptom-to-failure-shape lookup with a cursor.

- current_question(): prompt at the cursor
- pick(label):        record an answer, cursor unchanged
- is_correct():       exact label comparison
- next():             clear pick, advance cursor (wraps)

Independent of the Simulator.

============================================================
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .types import FailureShape


logger = logging.getLogger(__name__)


# ============================================================
# QUESTIONS
# ============================================================

@dataclass(frozen=True)
class QuizQuestion:
    """A symptom description and its failure-shape label."""
    prompt: str
    answer: str


QUIZ_QUESTIONS: Tuple[QuizQuestion, ...] = (
    QuizQuestion(
        prompt=(
            "QPS spikes during the outage; p99 explodes; errors sometimes "
            "recover on retry."
        ),
        answer=FailureShape.RETRY_STORM.value,
    ),
    QuizQuestion(
        prompt=(
            "Timeouts without errors; partial hangs; recovery takes a long "
            "time after the fix."
        ),
        answer=FailureShape.BACKPRESSURE_COLLAPSE.value,
    ),
    QuizQuestion(
        prompt=(
            "Hard limit hit (connections/threads); flapping availability; "
            "restart helps briefly then relapses."
        ),
        answer=FailureShape.RESOURCE_EXHAUSTION.value,
    ),
)

QUIZ_CHOICES: Tuple[str, ...] = tuple(shape.value for shape in FailureShape)


@dataclass(frozen=True)
class QuizFeedback:
    """Feedback for a picked answer."""
    picked: str
    correct_label: str
    is_correct: bool

    @property
    def message(self) -> str:
        if self.is_correct:
            return (
                f"Correct. This pattern most strongly matches "
                f"{self.correct_label}."
            )
        return f"Not quite. The best match is {self.correct_label}."


# ============================================================
# QUIZ MATCHER
# ============================================================

class SymptomQuiz:
    """Cursor over an ordered list of symptom questions."""

    def __init__(self, questions: Sequence[QuizQuestion] = QUIZ_QUESTIONS):
        if not questions:
            raise ValueError("SymptomQuiz requires at least one question")
        self._questions = tuple(questions)
        self._index = 0
        self._picked: Optional[str] = None

    @property
    def index(self) -> int:
        return self._index

    @property
    def picked(self) -> Optional[str]:
        return self._picked

    @property
    def choices(self) -> Tuple[str, ...]:
        return QUIZ_CHOICES

    @property
    def question_count(self) -> int:
        return len(self._questions)

    def current_question(self) -> str:
        """Prompt of the question at the cursor."""
        return self._questions[self._index].prompt

    def correct_label(self) -> Optional[str]:
        """
        Correct label of the current question.

        Only exposed after a pick; None otherwise.
        """
        if self._picked is None:
            return None
        return self._questions[self._index].answer

    def pick(self, label: str) -> None:
        """Record the chosen label without moving the cursor."""
        self._picked = label

    def is_correct(self) -> bool:
        """Whether the picked label exactly matches the current answer."""
        if self._picked is None:
            return False
        return self._picked == self._questions[self._index].answer

    def feedback(self) -> Optional[QuizFeedback]:
        """Feedback for the current pick, or None if nothing is picked."""
        if self._picked is None:
            return None
        return QuizFeedback(
            picked=self._picked,
            correct_label=self._questions[self._index].answer,
            is_correct=self.is_correct(),
        )

    def next(self) -> str:
        """
        Clear the pick and advance to the next question.

        Wraps to the first question after the last one.

        Returns:
            Prompt of the new current question
        """
        self._picked = None
        self._index = (self._index + 1) % len(self._questions)
        logger.debug(f"Quiz advanced to question {self._index}")
        return self.current_question()

    def restart(self) -> None:
        """Return to the first question with nothing picked."""
        self._picked = None
        self._index = 0
