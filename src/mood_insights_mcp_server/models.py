"""
Pydantic models and schemas for the cross-analysis engine and MCP tools.

Engine models are immutable and serialize with the camelCase field names used
by the journaling app's documents (``memberId``, ``emotionalSync``, ...).
Tool input models describe MCP tool arguments and drive JSON schema
generation.

``PrimaryMood`` mirrors the mood picker of the daily mood journal. Records
with any other primary mood fail validation and are dropped, so the enum has
to be extended whenever the journal's mood list changes.
"""

import math
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ENGINE_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    extra="ignore",
)


class PrimaryMood(str, Enum):
    """Closed vocabulary of primary moods offered by the daily mood journal.

    Keep in sync with the journal's mood picker.
    """

    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    ANXIOUS = "anxious"
    CALM = "calm"
    EXCITED = "excited"
    TIRED = "tired"
    STRESSED = "stressed"


class InteractionPattern(str, Enum):
    """How two members' moods relate over the analysis window."""

    MIRRORING = "mirroring"
    SUPPORTIVE = "supportive"
    CONFLICTING = "conflicting"
    INDEPENDENT = "independent"


def parse_timestamp(value: Any) -> datetime:
    """
    Convert a raw timestamp into a datetime without changing its wall clock.

    Accepts datetimes, dates (midnight), ISO-8601 strings (a trailing ``Z``
    and date-only strings are allowed) and numeric epoch seconds, which are
    read as UTC.

    Raises:
        ValueError: If the value cannot be read as a timestamp
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, bool):
        raise ValueError("boolean is not a timestamp")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError("timestamp is not finite")
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {value}") from e
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("timestamp is empty")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as e:
            raise ValueError(f"unrecognized timestamp {value!r}") from e
    raise ValueError(f"unsupported timestamp type {type(value).__name__}")


def has_time_of_day(value: Any) -> bool:
    """Whether a raw timestamp carries a time of day, not just a calendar date."""
    if isinstance(value, datetime):
        return True
    if isinstance(value, date):
        return False
    if isinstance(value, str):
        text = value.strip()
        return "T" in text or " " in text
    return True


# Engine models


class MoodState(BaseModel):
    """The mood part of a daily record."""

    model_config = ENGINE_MODEL_CONFIG

    primary: PrimaryMood
    intensity: float = Field(ge=0.0, le=10.0, allow_inf_nan=False)
    secondary: FrozenSet[str] = Field(default_factory=frozenset)

    @field_validator("primary", mode="before")
    @classmethod
    def _normalize_primary(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("secondary", mode="before")
    @classmethod
    def _clean_secondary(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(
                label.strip() for label in value if isinstance(label, str) and label.strip()
            )
        return value


class MoodRecord(BaseModel):
    """One self-report by one member on one calendar day.

    ``has_time`` is False when the record only carries a calendar date. Such
    records still count for date matching but have no hour of day.
    """

    model_config = ENGINE_MODEL_CONFIG

    member_id: str = Field(min_length=1)
    created_at: datetime
    has_time: bool = True
    mood: MoodState
    energy: float = Field(ge=0.0, le=10.0, allow_inf_nan=False)
    stress: float = Field(ge=0.0, le=10.0, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _resolve_timestamp(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        raw = data.get("createdAt")
        if raw is None:
            raw = data.get("created_at")
        if raw is None and data.get("date") is not None:
            # Journal documents always carry a "date" string even when createdAt is missing
            raw = data["date"]
            data["createdAt"] = raw

        if raw is not None and "hasTime" not in data and "has_time" not in data:
            data["hasTime"] = has_time_of_day(raw)
        return data

    @field_validator("member_id", mode="before")
    @classmethod
    def _normalize_member_id(cls, value: Any) -> Any:
        # Some clients send numeric user ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, value: Any) -> datetime:
        return parse_timestamp(value)

    @property
    def calendar_date(self) -> date:
        """Wall-clock calendar date of the record."""
        return self.created_at.date()

    @property
    def hour(self) -> Optional[int]:
        """Wall-clock hour of the record (0-23), or None for date-only records."""
        if not self.has_time:
            return None
        return self.created_at.hour


class PairMetric(BaseModel):
    """Relationship metrics for one unordered pair of members."""

    model_config = ENGINE_MODEL_CONFIG

    member_a: str
    member_b: str
    matched_days: int = Field(ge=1)
    emotional_sync: float = Field(ge=0.0, le=1.0)
    stress_correlation: float = Field(ge=-1.0, le=1.0)
    energy_alignment: float = Field(ge=0.0, le=1.0)
    interaction_pattern: InteractionPattern

    @model_validator(mode="after")
    def _check_canonical_order(self) -> "PairMetric":
        if not self.member_a < self.member_b:
            raise ValueError(
                f"pair members must be ordered: {self.member_a!r} < {self.member_b!r}"
            )
        return self

    @property
    def members(self) -> Tuple[str, str]:
        return (self.member_a, self.member_b)


class GroupDynamicsSummary(BaseModel):
    """Group-level aggregate over all pairs and member series."""

    model_config = ENGINE_MODEL_CONFIG

    overall_harmony: float = Field(ge=0.0, le=1.0)
    emotional_stability: float = Field(ge=0.0, le=1.0)
    support_network: List[str] = Field(default_factory=list)
    stress_points: List[str] = Field(default_factory=list)


class TemporalPatternSet(BaseModel):
    """Hour-of-day aggregates over every record in the window."""

    model_config = ENGINE_MODEL_CONFIG

    peak_emotion_times: List[str] = Field(default_factory=list)
    low_energy_periods: List[str] = Field(default_factory=list)
    group_sync_moments: List[str] = Field(default_factory=list)


class CrossAnalysisResult(BaseModel):
    """The complete output of one cross-analysis run."""

    model_config = ENGINE_MODEL_CONFIG

    correlations: List[PairMetric]
    group_dynamics: GroupDynamicsSummary
    temporal_patterns: TemporalPatternSet

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict for the text-generation and storage collaborators."""
        return self.model_dump(mode="json", by_alias=True)

    @property
    def member_ids(self) -> List[str]:
        """Every member that appears in at least one pair."""
        return sorted({member for pair in self.correlations for member in pair.members})


class ToolName(str, Enum):
    """Enumeration of all available tools."""

    GROUP_CROSS_ANALYSIS = "mood_group_cross_analysis"
    STORED_ANALYSIS = "mood_stored_analysis"
    ANALYSIS_HISTORY = "mood_analysis_history"
    HEALTH_CHECK = "mood_health_check"


# Input Models


class CrossAnalysisInput(BaseModel):
    """Input for the group cross-analysis tool."""

    group_id: str = Field(min_length=1, description="Group identifier")
    records: List[Dict[str, Any]] = Field(
        description="Raw mood records for the analysis window, one per member per day"
    )
    window_start: Optional[date] = Field(
        default=None, description="First day of the analysis window (YYYY-MM-DD)"
    )
    persist: Optional[bool] = Field(default=None, description="Store the result")
    redact: Optional[bool] = Field(default=None, description="Hash member ids in the response")


class StoredAnalysisInput(BaseModel):
    """Input for the stored analysis lookup tool."""

    group_id: str = Field(min_length=1, description="Group identifier")
    window_start: date = Field(description="First day of the analysis window (YYYY-MM-DD)")
    redact: Optional[bool] = Field(default=None, description="Hash member ids in the response")


class AnalysisHistoryInput(BaseModel):
    """Input for the analysis history tool."""

    group_id: str = Field(min_length=1, description="Group identifier")


class HealthCheckInput(BaseModel):
    """Input for the health check tool."""

    store_path: Optional[str] = Field(
        default=None, description="Path to the analysis result store"
    )


# Output Models


class StoredAnalysisSummary(BaseModel):
    """One stored analysis run, without its payload."""

    analysis_id: str
    group_id: str
    window_start: str
    created_at: str
    version: str


class AnalysisHistoryOutput(BaseModel):
    """Output for the analysis history tool."""

    group_id: str
    analyses: List[StoredAnalysisSummary]


# Schema generation


def get_tool_input_schema(tool_name: ToolName) -> Dict[str, Any]:
    """Get JSON schema for tool input."""
    input_models = {
        ToolName.GROUP_CROSS_ANALYSIS: CrossAnalysisInput,
        ToolName.STORED_ANALYSIS: StoredAnalysisInput,
        ToolName.ANALYSIS_HISTORY: AnalysisHistoryInput,
        ToolName.HEALTH_CHECK: HealthCheckInput,
    }

    model = input_models.get(tool_name)
    if model:
        return model.model_json_schema()
    return {}


def get_tool_output_model(tool_name: ToolName) -> Optional[type[BaseModel]]:
    """Get output model for a tool."""
    output_models = {
        ToolName.GROUP_CROSS_ANALYSIS: CrossAnalysisResult,
        ToolName.STORED_ANALYSIS: CrossAnalysisResult,
        ToolName.ANALYSIS_HISTORY: AnalysisHistoryOutput,
    }

    return output_models.get(tool_name)
