"""Request orchestration: validates input, reads/writes the entity store and
runs the detection heuristic for each API operation.

The service owns neither global state nor I/O; the app factory injects the
store and heuristic, so tests can build isolated instances."""

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import pydantic

from verifake import config
from verifake.detector import DetectionHeuristic
from verifake.errors import NotFoundError, ValidationError
from verifake.models import (
    ActivityEntry,
    Analytics,
    AnalyzeRequest,
    CreateUserRequest,
    Detection,
    PublicUser,
    SystemMetrics,
    TrendPoint,
    UpdateUserRequest,
)
from verifake.storage import EntityStore, sort_timestamp

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=pydantic.BaseModel)


def validate_payload(model: Type[M], data: Optional[Mapping[str, Any]]) -> M:
    """Validate ``data`` against ``model``, collecting every field violation."""
    try:
        return model.model_validate(dict(data or {}))
    except pydantic.ValidationError as exc:
        errors = [
            {"path": list(err["loc"]), "message": err["msg"]}
            for err in exc.errors(include_url=False, include_context=False)
        ]
        logger.warning(f"{model.__name__} rejected: {[e['path'] for e in errors]}")
        raise ValidationError(errors) from exc


def as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC; aware ones pass through."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def username_from_url(url: str) -> str:
    """Last '/'-separated segment of the url, or 'unknown' when empty."""
    return url.rsplit("/", 1)[-1] or "unknown"


class DetectionService:
    """Answers every API operation against one store and one heuristic."""

    def __init__(
        self,
        store: EntityStore,
        heuristic: Optional[DetectionHeuristic] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self._rng = rng or random.Random()
        self.heuristic = heuristic or DetectionHeuristic(self._rng)

    # ==================== Analysis ====================

    def analyze(self, url: Any, platform: Any) -> Dict[str, Any]:
        """Get-or-create the Account for ``url`` and append a fresh Detection.

        Not atomic: two concurrent first analyses of one url may both create
        an Account.
        """
        request = validate_payload(AnalyzeRequest, {"url": url, "platform": platform})

        account = self.store.get_account_by_url(request.url)
        if account is None:
            account = self.store.create_account({
                "platform": request.platform,
                "username": username_from_url(request.url),
                "url": request.url,
                "profileData": {"url": request.url, "platform": request.platform},
                "analyzedBy": None,
            })
            logger.info(f"[{account.id[:8]}] NEW ACCOUNT  username={account.username}")

        result = self.heuristic.analyze(request.url, request.platform)
        detection = self.store.create_detection({"accountId": account.id, **result.as_record()})

        logger.info(
            f"[{account.id[:8]}] ANALYZE  platform={account.platform}  "
            f"score={detection.fakeScore:.0f}  risk={detection.riskLevel}"
        )
        return {"account": account, "detection": detection}

    def get_detections_by_account(self, account_id: str) -> Dict[str, Any]:
        account = self.store.get_account(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return {
            "account": account,
            "detections": self.store.get_detections_by_account(account_id),
        }

    # ==================== Dashboard ====================

    def get_dashboard_analytics(self) -> Dict[str, Any]:
        """Latest analytics snapshot (None on an unseeded store) plus recent detections."""
        analytics: Optional[Analytics] = self.store.get_latest_analytics()
        recent: List[Detection] = self.store.get_recent_detections(config.DASHBOARD_RECENT_LIMIT)
        return {"analytics": analytics, "recentDetections": recent}

    def get_recent_activity(self) -> List[ActivityEntry]:
        """Most recently analyzed accounts with their latest detection.

        Accounts that have never been scored are skipped. "Latest" means the
        highest detectedAt; ties go to the later insert.
        """
        activities: List[ActivityEntry] = []
        for account in self.store.get_recent_accounts(config.ACTIVITY_SCAN_LIMIT):
            detections = self.store.get_detections_by_account(account.id)
            if not detections:
                continue
            latest = max(reversed(detections), key=lambda d: sort_timestamp(d.detectedAt))
            activities.append(ActivityEntry(
                id=account.id,
                username=account.username,
                platform=account.platform,
                riskLevel=latest.riskLevel,
                analyzedAt=account.analyzedAt,
                fakeScore=latest.fakeScore,
            ))

        activities.sort(key=lambda entry: sort_timestamp(entry.analyzedAt), reverse=True)
        return activities[:config.ACTIVITY_LIMIT]

    # ==================== Admin ====================

    def get_system_status(self) -> Optional[SystemMetrics]:
        return self.store.get_latest_system_metrics()

    def get_system_metrics_history(self, hours: float) -> List[SystemMetrics]:
        return self.store.get_system_metrics_history(hours)

    def list_users(self) -> List[PublicUser]:
        return [PublicUser.from_user(user) for user in self.store.get_all_users()]

    def create_user(self, data: Optional[Mapping[str, Any]]) -> PublicUser:
        request = validate_payload(CreateUserRequest, data)
        user = self.store.create_user(request.model_dump())
        logger.info(f"[{user.id[:8]}] USER CREATED  username={user.username}  role={user.role}")
        return PublicUser.from_user(user)

    def update_user(self, user_id: str, data: Optional[Mapping[str, Any]]) -> PublicUser:
        request = validate_payload(UpdateUserRequest, data)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        user = self.store.update_user(user_id, changes)
        if user is None:
            raise NotFoundError("User", user_id)
        logger.info(f"[{user.id[:8]}] USER UPDATED  fields={sorted(changes)}")
        return PublicUser.from_user(user)

    # ==================== Trends ====================

    def get_analytics_trends(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[Any]:
        """Stored snapshots within [start_date, end_date], defaulting to the
        trailing window. With no stored rows, a synthetic daily series ending
        today is returned instead (never persisted)."""
        end = as_utc(end_date) if end_date else self.store.now()
        start = as_utc(start_date) if start_date else end - timedelta(days=config.TRENDS_WINDOW_DAYS)

        rows = self.store.get_analytics_by_date_range(start, end)
        if rows:
            return rows
        return self._synthetic_trends(config.TRENDS_WINDOW_DAYS)

    def _synthetic_trends(self, days: int) -> List[TrendPoint]:
        today = self.store.now().date()
        return [
            TrendPoint(
                date=(today - timedelta(days=days - 1 - offset)).isoformat(),
                analyzed=int(80 + self._rng.random() * 40),
                fake=int(5 + self._rng.random() * 15),
                accuracy=95 + self._rng.random() * 4,
            )
            for offset in range(days)
        ]
