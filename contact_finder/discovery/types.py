"""
Data model for contact discovery.

Candidate is the unit the whole pipeline passes around; SearchOptions is the
caller-facing knob set. Both are pydantic models so provider output and
caller dicts are validated at the boundary.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contact_finder.common.config import Config
from contact_finder.discovery.lexicon import is_placeholder_name


class Industry(str, Enum):
    """Closed set of industries used to adapt prompts and scoring."""
    TECHNOLOGY = "technology"
    HEALTHCARE = "healthcare"
    FINANCIAL = "financial"
    LEGAL = "legal"
    CONSTRUCTION = "construction"
    MARKETING = "marketing"
    RETAIL = "retail"
    EDUCATION = "education"
    MANUFACTURING = "manufacturing"
    CONSULTING = "consulting"
    TRANSPORTATION = "transportation"
    ENERGY = "energy"
    HOSPITALITY = "hospitality"
    AGRICULTURE = "agriculture"
    GOVERNMENT = "government"

    @classmethod
    def parse(cls, value: Union["Industry", str, None]) -> Optional["Industry"]:
        """Case-insensitive lookup; unknown or empty values give None."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class PhaseTag(str, Enum):
    """Provenance tag of each search phase."""
    LEADERSHIP = "leadership"
    DEPARTMENT_HEAD = "department_head"
    MIDDLE_MANAGEMENT = "middle_management"
    CUSTOM_TARGET = "custom_target"


def _clamp_score(value: Any) -> int:
    return max(0, min(100, int(round(float(value)))))


class RawPair(BaseModel):
    """One {name, role} entry as returned by the provider, before validation."""
    name: str
    role: Optional[str] = None


class Candidate(BaseModel):
    """A discovered person at a company, scored and tagged with provenance."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Person's name as returned by the provider")
    role: Optional[str] = Field(default=None, description="Current role or title")
    probability: int = Field(description="Final confidence 0-100")
    name_confidence_score: int = Field(description="Validator score before phase bonuses")
    verification_source: str = Field(description="ai_<phase tag> of the surviving instance")
    completed_searches: List[str] = Field(default_factory=list)
    last_validated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Never hold an empty or placeholder name."""
        v = v.strip()
        if not v:
            raise ValueError("Candidate name must not be empty")
        if is_placeholder_name(v):
            raise ValueError(f"Placeholder name rejected: {v}")
        return v

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("probability", "name_confidence_score", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> int:
        return _clamp_score(v)

    def with_probability(self, probability: int) -> "Candidate":
        """Copy with a new (clamped) probability."""
        return self.model_copy(update={"probability": _clamp_score(probability)})

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe record for the persistence layer."""
        return self.model_dump(mode="json")


class SearchOptions(BaseModel):
    """Caller options for a single orchestration call."""

    minimum_confidence: int = Field(default_factory=lambda: Config.DEFAULT_MINIMUM_CONFIDENCE, ge=0, le=100)
    max_contacts: int = Field(default_factory=lambda: Config.DEFAULT_MAX_CONTACTS, ge=1)
    enable_core_leadership: bool = True
    enable_department_heads: bool = True
    enable_middle_management: bool = True
    enable_custom_search: bool = False
    custom_search_target: str = ""
    # Second custom slot; takes precedence when enabled
    enable_custom_search_2: bool = False
    custom_search_target_2: str = ""
    industry: Optional[Industry] = None

    @field_validator("industry", mode="before")
    @classmethod
    def parse_industry(cls, v: Any) -> Optional[Industry]:
        return Industry.parse(v)

    @field_validator("custom_search_target", "custom_search_target_2", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return "" if v is None else v

    @classmethod
    def coerce(cls, options: Union["SearchOptions", Dict[str, Any], None]) -> "SearchOptions":
        """Accept an options model, a plain dict, or None (defaults)."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(options)

    def active_custom_target(self) -> Optional[str]:
        """The custom target in effect, or None when custom search is off."""
        if self.enable_custom_search_2:
            target = self.custom_search_target_2
        elif self.enable_custom_search:
            target = self.custom_search_target
        else:
            return None
        target = target.strip()
        return target or None
