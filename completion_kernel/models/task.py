"""Task Model — externally owned tasks the engine reads and ranks."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class UserTier(str, Enum):
    FREE = "free"
    PRO = "pro"
    VANGUARD_PRO = "vanguard_pro"

    @property
    def is_paid(self) -> bool:
        return self in (UserTier.PRO, UserTier.VANGUARD_PRO)


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    NEED_HELP = "need_help"


class TaskCategory(str, Enum):
    BOSS = "boss"
    QUEST = "quest"
    EXPLORATION = "exploration"
    ITEM = "item"
    CHARACTER = "character"
    CUSTOM = "custom"


class Task(BaseModel):
    """A diary task. Owned by the caller; never mutated by the engine."""

    id: str
    title: str = ""
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    category: str = TaskCategory.CUSTOM.value   # Unknown values are accepted and rank last
    created_at: Optional[datetime] = None       # Missing is treated as epoch 0
    completed_at: Optional[datetime] = None
    game_id: Optional[str] = None
    source: Optional[str] = None                # e.g., "user", "ai"
