"""
Pydantic schemas for the Failure Lab output surface.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .models import LogEntry, MetricSnapshot
from .quiz import SymptomQuiz
from .simulator import Simulator

# =======================
# METRICS
# =======================

class MetricSnapshotSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    incoming_load: float
    error_rate: float
    queue_depth: float
    p50: float  # ms
    p99: float  # ms
    healthy_capacity: float

    @classmethod
    def from_snapshot(cls, snapshot: MetricSnapshot) -> "MetricSnapshotSchema":
        return cls(**snapshot.to_dict())

# =======================
# SIMULATOR
# =======================

class LogEntrySchema(BaseModel):
    action_id: str
    step: int
    headline: str
    narrative: str
    reveal: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "LogEntrySchema":
        return cls(**entry.to_dict())

class ActionSchema(BaseModel):
    action_id: str
    label: str

class SimulatorStateSchema(BaseModel):
    scenario: str
    prompt_title: str
    prompt_body: str
    diagram: str
    actions: List[ActionSchema]
    snapshot: MetricSnapshotSchema
    step: int
    revealed: bool
    log: List[LogEntrySchema]
    latest: Optional[LogEntrySchema] = None
    hint: Optional[str] = None

    @classmethod
    def from_simulator(cls, simulator: Simulator) -> "SimulatorStateSchema":
        spec = simulator.spec
        latest = simulator.latest_entry
        return cls(
            scenario=spec.key.value,
            prompt_title=spec.prompt_title,
            prompt_body=spec.prompt_body,
            diagram=spec.diagram,
            actions=[
                ActionSchema(action_id=a.action_id, label=a.label)
                for a in spec.actions
            ],
            snapshot=MetricSnapshotSchema.from_snapshot(simulator.snapshot),
            step=simulator.step,
            revealed=simulator.revealed,
            log=[LogEntrySchema.from_entry(e) for e in simulator.log],
            latest=LogEntrySchema.from_entry(latest) if latest else None,
            hint=simulator.hint,
        )

# =======================
# QUIZ
# =======================

class QuizStateSchema(BaseModel):
    index: int
    prompt: str
    choices: List[str]
    picked: Optional[str] = None
    correct_label: Optional[str] = None  # only after a pick
    is_correct: Optional[bool] = None
    message: Optional[str] = None

    @classmethod
    def from_quiz(cls, quiz: SymptomQuiz) -> "QuizStateSchema":
        feedback = quiz.feedback()
        return cls(
            index=quiz.index,
            prompt=quiz.current_question(),
            choices=list(quiz.choices),
            picked=quiz.picked,
            correct_label=quiz.correct_label(),
            is_correct=feedback.is_correct if feedback else None,
            message=feedback.message if feedback else None,
        )
