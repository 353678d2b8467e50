"""
models.py — Pydantic Entity Records and Request/Response Schemas
=================================================================

Entity records (User, Account, Detection, Analytics, SystemMetrics) are what
the in-memory store holds. Field names are camelCase because they are serialized
straight onto the wire for the dashboard client.

Request schemas validate inbound payloads; every violation is reported, not
just the first. Response projections (PublicUser, ActivityEntry, TrendPoint)
shape what leaves the service; PublicUser in particular never carries a password.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

import pydantic
from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator


Platform = Literal["twitter", "instagram", "facebook"]
Role = Literal["user", "admin", "analyst"]
RiskLevel = Literal["low", "medium", "high"]

PLATFORMS = ("twitter", "instagram", "facebook")
ROLES = ("user", "admin", "analyst")

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$')

_URL_ADAPTER = TypeAdapter(AnyUrl)

# Scores are whole numbers from the heuristic; floats are accepted for imported records
Score = Union[int, float]


def _check_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email")
    return value


# ═══════════════════════════════════════════════════════════════════════
# ENTITY RECORDS — stored by EntityStore
# ═══════════════════════════════════════════════════════════════════════

class User(BaseModel):
    id: str
    username: str
    email: str
    password: str
    role: Role = "user"
    isActive: bool = True
    lastActive: Optional[datetime] = None
    createdAt: Optional[datetime] = None


class Account(BaseModel):
    """A social profile, keyed by its URL. Created on first analysis."""

    id: str
    platform: Platform
    username: str
    url: str
    profileData: Optional[Dict[str, Any]] = None
    analyzedAt: Optional[datetime] = None
    analyzedBy: Optional[str] = None


class Detection(BaseModel):
    """One scoring run against an Account. Append-only history."""

    id: str
    accountId: str
    fakeScore: Score
    riskLevel: RiskLevel
    confidence: Score
    indicators: Optional[List[str]] = None
    analysisDetails: Optional[Dict[str, Any]] = None
    detectedAt: Optional[datetime] = None


class PlatformStats(BaseModel):
    analyzed: int = Field(default=0, ge=0)
    fake: int = Field(default=0, ge=0)


class Analytics(BaseModel):
    """Daily aggregate snapshot."""

    id: str
    date: datetime
    totalAnalyzed: int = Field(default=0, ge=0)
    fakeDetected: int = Field(default=0, ge=0)
    accuracyRate: float = 0.0
    avgAnalysisTime: float = Field(default=0.0, ge=0)  # seconds
    platformBreakdown: Optional[Dict[str, PlatformStats]] = None


class SystemMetrics(BaseModel):
    id: str
    timestamp: Optional[datetime] = None
    cpuUsage: float
    memoryUsage: float
    activeUsers: int = Field(ge=0)
    apiResponseTime: float = Field(ge=0)  # milliseconds
    uptime: float


# ═══════════════════════════════════════════════════════════════════════
# REQUEST MODELS — inbound payloads
# ═══════════════════════════════════════════════════════════════════════

class AnalyzeRequest(BaseModel):
    """Payload for POST /api/analyze."""

    model_config = ConfigDict(extra="ignore")

    url: str
    platform: Platform

    @field_validator("url")
    @classmethod
    def _valid_url(cls, value: str) -> str:
        try:
            _URL_ADAPTER.validate_python(value)
        except pydantic.ValidationError:
            raise ValueError("Please provide a valid URL")
        # Return the raw string, not the normalized URL
        return value


class CreateUserRequest(BaseModel):
    """Payload for POST /api/admin/users."""

    model_config = ConfigDict(extra="ignore")

    username: str = Field(min_length=3)
    email: str
    password: str = Field(min_length=6)
    role: Role = "user"
    isActive: bool = True

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        return _check_email(value)


class UpdateUserRequest(BaseModel):
    """Partial changes for PATCH /api/admin/users/{id}. Unset fields are left alone."""

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(default=None, min_length=3)
    email: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Role] = None
    isActive: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_email(value)


# ═══════════════════════════════════════════════════════════════════════
# RESPONSE PROJECTIONS
# ═══════════════════════════════════════════════════════════════════════

class PublicUser(BaseModel):
    """User as returned to API callers — no password field."""

    id: str
    username: str
    email: str
    role: Role
    isActive: bool
    lastActive: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls.model_validate(user.model_dump(exclude={"password"}))


class ActivityEntry(BaseModel):
    id: str
    username: str
    platform: Platform
    riskLevel: RiskLevel
    analyzedAt: Optional[datetime] = None
    fakeScore: Score


class TrendPoint(BaseModel):
    """One day of the synthetic trend series (not persisted)."""

    date: str  # YYYY-MM-DD
    analyzed: int
    fake: int
    accuracy: float
