# theatre/services/activity.py
import logging
from typing import Any, Dict, List, Optional

from theatre.database import USER_ACTIVITY, StoreError, Store
from theatre.models.activity import ActivityType, UserActivity

logger = logging.getLogger(__name__)


class ActivityLog:
    """Append-only audit trail of user actions."""

    def __init__(self, store: Store):
        self.store = store

    async def log(
        self,
        user_id: str,
        activity_type: ActivityType,
        description: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[UserActivity]:
        """Record an activity. A failed write is logged and never raised to the caller."""
        try:
            row = await self.store.insert(USER_ACTIVITY, {
                "user_id": user_id,
                "activity_type": ActivityType(activity_type).value,
                "activity_description": description,
                "metadata": metadata or {},
            })
        except StoreError:
            logger.exception("Failed to log %s activity", activity_type, extra={"user_id": user_id})
            return None
        return UserActivity.model_validate(row)

    async def recent(self, limit: int = 50, user_id: Optional[str] = None) -> List[UserActivity]:
        filters = {"user_id": user_id} if user_id else None
        rows = await self.store.select(USER_ACTIVITY, filters, order_by="created_at", descending=True, limit=limit)
        return [UserActivity.model_validate(row) for row in rows]
