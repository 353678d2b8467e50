"""Thread-safe in-memory entity store with startup seed data.

Holds five keyed collections (users, accounts, detections, analytics,
system metrics) for the lifetime of the process. Each collection has its
own lock; no operation spans two collections atomically. Secondary-key
lookups (email, url, accountId) are linear scans.

Nothing is persisted; a new EntityStore starts empty apart from the seed.
"""

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from verifake.errors import NotFoundError
from verifake.models import Account, Analytics, Detection, SystemMetrics, User

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Sort key stand-in for records with no timestamp (ranks lowest)
EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sort_timestamp(value: Optional[datetime]) -> datetime:
    return value if value is not None else EPOCH


class Collection(Generic[T]):
    """Id-keyed records of one entity kind, guarded by a single lock.

    Insertion order is preserved, so scans return records oldest-first.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._items: Dict[str, T] = {}
        self._lock = threading.Lock()

    def get(self, item_id: str) -> Optional[T]:
        with self._lock:
            return self._items.get(item_id)

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """First record (in insertion order) matching predicate."""
        with self._lock:
            return next((item for item in self._items.values() if predicate(item)), None)

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        with self._lock:
            return [item for item in self._items.values() if predicate(item)]

    def all(self) -> List[T]:
        with self._lock:
            return list(self._items.values())

    def recent(self, key: Callable[[T], Optional[datetime]], limit: int) -> List[T]:
        """Newest first by the given timestamp, truncated to limit."""
        with self._lock:
            items = list(self._items.values())
        items.sort(key=lambda item: sort_timestamp(key(item)), reverse=True)
        return items[:max(limit, 0)]

    def insert(self, item: T) -> T:
        with self._lock:
            self._items[item.id] = item
        return item

    def update(self, item_id: str, changes: Dict[str, Any]) -> Optional[T]:
        """Merge changes into an existing record. Returns None for unknown ids."""
        changes = {k: v for k, v in changes.items() if k != "id"}
        with self._lock:
            current = self._items.get(item_id)
            if current is None:
                return None
            updated = current.model_copy(update=changes)
            self._items[item_id] = updated
            return updated

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class EntityStore:
    """In-memory repository for every entity kind.

    Inserts assign a fresh uuid4 id and fill defaults for omitted optional
    fields; timestamps come from the injected clock. Lookups return None on
    a miss rather than raising.
    """

    def __init__(
        self,
        seed: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._clock = clock or _utc_now
        self.users: Collection[User] = Collection("users")
        self.accounts: Collection[Account] = Collection("accounts")
        self.detections: Collection[Detection] = Collection("detections")
        self.analytics: Collection[Analytics] = Collection("analytics")
        self.system_metrics: Collection[SystemMetrics] = Collection("system_metrics")
        if seed:
            seed_store(self)

    def now(self) -> datetime:
        return self._clock()

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # ==================== Users ====================

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.users.find(lambda user: user.email == email)

    def create_user(self, data: Dict[str, Any]) -> User:
        now = self.now()
        fields = {k: v for k, v in data.items() if v is not None}
        fields.setdefault("role", "user")
        fields.setdefault("isActive", True)
        user = User(**{**fields, "id": self._new_id(), "createdAt": now, "lastActive": now})
        return self.users.insert(user)

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[User]:
        return self.users.update(user_id, changes)

    def get_all_users(self) -> List[User]:
        return self.users.all()

    # ==================== Accounts ====================

    def get_account(self, account_id: str) -> Optional[Account]:
        return self.accounts.get(account_id)

    def get_account_by_url(self, url: str) -> Optional[Account]:
        return self.accounts.find(lambda account: account.url == url)

    def create_account(self, data: Dict[str, Any]) -> Account:
        analyzed_by = data.get("analyzedBy")
        if analyzed_by is not None and self.users.get(analyzed_by) is None:
            raise NotFoundError("User", analyzed_by)
        account = Account(**{
            **data,
            "id": self._new_id(),
            "profileData": data.get("profileData"),
            "analyzedBy": analyzed_by,
            "analyzedAt": self.now(),
        })
        return self.accounts.insert(account)

    def get_accounts_by_user(self, user_id: str) -> List[Account]:
        return self.accounts.filter(lambda account: account.analyzedBy == user_id)

    def get_recent_accounts(self, limit: int) -> List[Account]:
        return self.accounts.recent(lambda account: account.analyzedAt, limit)

    # ==================== Detections ====================

    def get_detection(self, detection_id: str) -> Optional[Detection]:
        return self.detections.get(detection_id)

    def create_detection(self, data: Dict[str, Any]) -> Detection:
        account_id = data.get("accountId")
        if account_id is None or self.accounts.get(account_id) is None:
            raise NotFoundError("Account", str(account_id))
        detection = Detection(**{
            **data,
            "id": self._new_id(),
            "indicators": data.get("indicators"),
            "analysisDetails": data.get("analysisDetails"),
            "detectedAt": self.now(),
        })
        return self.detections.insert(detection)

    def get_detections_by_account(self, account_id: str) -> List[Detection]:
        """Detection history for an account, oldest first."""
        return self.detections.filter(lambda detection: detection.accountId == account_id)

    def get_recent_detections(self, limit: int) -> List[Detection]:
        return self.detections.recent(lambda detection: detection.detectedAt, limit)

    # ==================== Analytics ====================

    def create_analytics(self, data: Dict[str, Any]) -> Analytics:
        analytics = Analytics(**{
            **data,
            "id": self._new_id(),
            "totalAnalyzed": data.get("totalAnalyzed") or 0,
            "fakeDetected": data.get("fakeDetected") or 0,
            "accuracyRate": data.get("accuracyRate") or 0,
            "avgAnalysisTime": data.get("avgAnalysisTime") or 0,
            "platformBreakdown": data.get("platformBreakdown"),
        })
        return self.analytics.insert(analytics)

    def get_analytics_by_date_range(self, start: datetime, end: datetime) -> List[Analytics]:
        """Snapshots whose date falls in [start, end]."""
        return self.analytics.filter(lambda row: start <= row.date <= end)

    def get_latest_analytics(self) -> Optional[Analytics]:
        latest = self.analytics.recent(lambda row: row.date, 1)
        return latest[0] if latest else None

    # ==================== System Metrics ====================

    def create_system_metrics(self, data: Dict[str, Any]) -> SystemMetrics:
        metrics = SystemMetrics(**{**data, "id": self._new_id(), "timestamp": self.now()})
        return self.system_metrics.insert(metrics)

    def get_latest_system_metrics(self) -> Optional[SystemMetrics]:
        latest = self.system_metrics.recent(lambda row: row.timestamp, 1)
        return latest[0] if latest else None

    def get_system_metrics_history(self, hours: float) -> List[SystemMetrics]:
        """Snapshots from the last ``hours`` hours, oldest first."""
        cutoff = self.now() - timedelta(hours=hours)
        rows = self.system_metrics.filter(lambda row: sort_timestamp(row.timestamp) >= cutoff)
        rows.sort(key=lambda row: sort_timestamp(row.timestamp))
        return rows


# ==================== Seed Data ====================

SEED_ADMIN = {
    "username": "admin",
    "email": "admin@verifake.com",
    "password": "hashed_password",
    "role": "admin",
    "isActive": True,
}

SEED_ANALYTICS = {
    "totalAnalyzed": 2847,
    "fakeDetected": 342,
    "accuracyRate": 99.2,
    "avgAnalysisTime": 1.2,
    "platformBreakdown": {
        "twitter": {"analyzed": 1195, "fake": 143},
        "instagram": {"analyzed": 996, "fake": 119},
        "facebook": {"analyzed": 656, "fake": 80},
    },
}

SEED_SYSTEM_METRICS = {
    "cpuUsage": 45.2,
    "memoryUsage": 62.8,
    "activeUsers": 1247,
    "apiResponseTime": 847,
    "uptime": 98.9,
}


def seed_store(store: EntityStore) -> None:
    """Insert the admin user, today's analytics snapshot and one metrics snapshot."""
    store.create_user(dict(SEED_ADMIN))
    store.create_analytics({**SEED_ANALYTICS, "date": store.now()})
    store.create_system_metrics(dict(SEED_SYSTEM_METRICS))
    logger.info(
        f"Store seeded: users={len(store.users)} analytics={len(store.analytics)} "
        f"metrics={len(store.system_metrics)}"
    )
