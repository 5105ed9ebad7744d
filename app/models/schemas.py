"""Pydantic models describing API payloads."""
from __future__ import annotations

import re
from datetime import date as date_type, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def collapse_whitespace(value: str) -> str:
    """Trim and collapse runs of whitespace into single spaces."""
    return re.sub(r"\s+", " ", value.strip())


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TechnicalFocus(str, Enum):
    TECHNIQUE = "Técnica"
    RHYTHM = "Ritmo"
    CLEANLINESS = "Limpieza"
    COORDINATION = "Coordinación"
    REPERTOIRE = "Repertorio"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ExperienceUnit(str, Enum):
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"


class AnalysisType(str, Enum):
    """Coaching sections the user can request from the AI analysis."""

    PATTERNS = "patterns"
    WEAKNESSES = "weaknesses"
    EXPERIMENTS = "experiments"
    PLATEAU = "plateau"
    STRENGTHS = "strengths"
    PROGRESSION = "progression"


# Practice sessions
class MindsetChecklist(CamelModel):
    """Five deliberate-practice behaviours reported after a session."""

    warmed_up: bool
    practiced_slow: bool
    recorded: bool
    took_breaks: bool
    reviewed_mistakes: bool

    def completed_count(self) -> int:
        return sum(
            (self.warmed_up, self.practiced_slow, self.recorded, self.took_breaks, self.reviewed_mistakes)
        )


class SessionCreate(CamelModel):
    """Schema for creating or replacing a practice session."""

    micro_objective: str = Field(min_length=5, max_length=500)
    technical_focus: TechnicalFocus
    duration_min: int = Field(ge=1, le=300)

    bpm_target: int | None = Field(default=None, ge=20, le=400)
    bpm_achieved: int | None = Field(default=None, ge=20, le=400)
    quality_rating: int | None = Field(default=None, ge=1, le=5)
    rpe: int | None = Field(default=None, ge=1, le=10)

    mindset_checklist: MindsetChecklist | None = None
    reflection: str | None = Field(default=None, max_length=1000)

    @field_validator("micro_objective", mode="before")
    @classmethod
    def clean_objective(cls, value: Any) -> Any:
        return collapse_whitespace(value) if isinstance(value, str) else value

    @field_validator("reflection")
    @classmethod
    def clean_reflection(cls, value: str | None) -> str | None:
        return collapse_whitespace(value) if value is not None else None


class SessionRead(SessionCreate):
    """Stored practice session as returned by the API and fed to prompts."""

    id: int
    created_at: datetime

    # Stored rows are trusted; only the shape matters when reading back.
    micro_objective: str
    reflection: str | None = None


class SessionListResponse(CamelModel):
    sessions: list[SessionRead]
    total: int
    has_more: bool


# Profile
class ProfileInput(CamelModel):
    """Schema for creating or updating the singleton profile."""

    level: ExperienceLevel
    experience_value: int = Field(gt=0)
    experience_unit: ExperienceUnit
    main_goal: str = Field(max_length=500)
    current_challenge: str | None = None
    ideal_practice_frequency: int | None = Field(default=None, ge=1, le=7)
    priority_techniques: str | None = None
    additional_context: dict[str, Any] = Field(default_factory=dict)

    @field_validator("main_goal")
    @classmethod
    def main_goal_required(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("main goal is required")
        return stripped

    @field_validator("current_challenge", "priority_techniques")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("additional_context", mode="before")
    @classmethod
    def null_context_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class ProfileRead(ProfileInput):
    id: int
    created_at: datetime
    updated_at: datetime


# Daily habits
class HabitEntry(CamelModel):
    done: bool = False
    duration_min: int | None = Field(default=None, ge=0, le=600)


class ChordsHabitEntry(HabitEntry):
    bpm: int | None = Field(default=None, ge=0, le=400)
    notes: str | None = None


class DailyHabitsPayload(CamelModel):
    """One day of habits; ``class`` is a reserved word so it maps to ``lesson``."""

    date: date_type
    warmup: HabitEntry = Field(default_factory=HabitEntry)
    chords: ChordsHabitEntry = Field(default_factory=ChordsHabitEntry)
    lesson: HabitEntry = Field(default_factory=HabitEntry, alias="class")


class MonthHabitStats(CamelModel):
    warmup_count: int
    chords_count: int
    class_count: int
    total_days: int
    current_streak: int


class HabitsMonthResponse(CamelModel):
    month: str
    days: list[DailyHabitsPayload]
    stats: MonthHabitStats


# Stats
class SessionStats(CamelModel):
    current_streak: int
    weekly_minutes: int
    weekly_average_quality: float | None
    weekly_session_count: int
    total_sessions: int
    total_minutes: int


class BPMDataPoint(CamelModel):
    date: datetime
    target: int | None = None
    achieved: int | None = None
    micro_objective: str


# AI analysis
class AIAnalysisRequest(CamelModel):
    """Body accepted by the AI analysis endpoints."""

    analysis_types: list[AnalysisType]
    session_limit: int = Field(default=30, ge=1, le=100)


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class CorrelationStrength(str, Enum):
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class AnalysisMetrics(CamelModel):
    total_sessions: int = 0
    avg_duration: float | None = None
    avg_bpm: float | None = Field(default=None, alias="avgBPM")
    avg_quality: float | None = None
    total_minutes: int = 0
    sessions_by_focus: dict[str, int] = Field(default_factory=dict)
    mindset_completion_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class DetectedPattern(CamelModel):
    type: str
    description: str
    evidence: str = ""


class MetricTrend(CamelModel):
    metric: str
    direction: TrendDirection
    details: str = ""


class Correlation(CamelModel):
    variables: list[str] = Field(min_length=2, max_length=2)
    relationship: str
    strength: CorrelationStrength


class AnalysisAlert(CamelModel):
    severity: AlertSeverity
    message: str

    @model_validator(mode="before")
    @classmethod
    def lowercase_severity(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("severity"), str):
            data = {**data, "severity": data["severity"].strip().lower()}
        return data


class DataAnalysisResult(CamelModel):
    """Structured output of the data-analysis step."""

    metrics: AnalysisMetrics = Field(default_factory=AnalysisMetrics)
    patterns: list[DetectedPattern] = Field(default_factory=list)
    trends: list[MetricTrend] = Field(default_factory=list)
    correlations: list[Correlation] = Field(default_factory=list)
    alerts: list[AnalysisAlert] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict using the wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)


class AIAnalysisResponse(CamelModel):
    success: bool = True
    data_analysis: DataAnalysisResult
    insights: str
    session_count: int


class QuickAnalysisResponse(CamelModel):
    success: bool = True
    analysis: str
    session_count: int
