# theatre/models/activity.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel


class ActivityType(str, Enum):
    LOGIN = "login"
    LOGOUT = "logout"
    REGISTRATION = "registration"
    BOOKING = "booking"
    REVIEW = "review"
    ACCOUNT_DELETION = "account_deletion"
    PROFILE_UPDATE = "profile_update"
    ADMIN_CREATED = "admin_created"
    ADMIN_DELETED = "admin_deleted"
    MESSAGE_RECEIVED = "message_received"


class UserActivity(BaseModel):
    id: str
    user_id: str
    activity_type: ActivityType
    activity_description: str
    metadata: Dict[str, Any] = {}
    created_at: datetime


class MessageType(str, Enum):
    NEWS = "news"
    ANNOUNCEMENT = "announcement"
    PERSONAL = "personal"


class MessageCreate(BaseModel):
    recipient_ids: List[str]
    subject: str
    content: str
    message_type: MessageType = MessageType.NEWS


class Message(MessageCreate):
    id: str
    sender_id: str
    sent_at: datetime
