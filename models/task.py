# taskrank/models/task.py
from typing import Optional
from datetime import datetime

from utils.datetime_utils import utc_now
from sqlmodel import SQLModel, Field

class Task(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str = ""
    due_date: datetime = Field(index=True)
    effort: str = "MEDIUM"        # SHORT / MEDIUM / LONG
    priority: str = Field(default="LOW", index=True)   # LOW / MEDIUM / HIGH, derived
    priority_score: int = 1       # 1..10, derived
    status: str = "PENDING"       # PENDING / COMPLETED
    owner_id: str = Field(index=True)
    source: str = "manual"        # manual / trello
    external_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
