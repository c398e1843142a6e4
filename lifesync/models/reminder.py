"""Reminder entity and request/response schemas."""

from datetime import date, datetime, time
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


class Category(str, Enum):
    """Fixed reminder categories."""

    FOOD = "Food"
    GYM = "Gym"
    WORK = "Work"
    HEALTH = "Health"
    OTHER = "Other"


class Priority(str, Enum):
    """Reminder priority levels."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Category filter value that matches every reminder
ALL_CATEGORIES = "All"


class Reminder(BaseModel):
    """A task to be completed at or around a point in time.

    Reminders are immutable; the store replaces them on every change.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = PydanticField(default_factory=uuid4)
    title: str = PydanticField(min_length=1)
    description: str | None = None
    category: Category
    priority: Priority
    due_at: datetime
    completed: bool = False
    created_at: datetime


class ReminderDraft(BaseModel):
    """Structured result of natural-language extraction.

    Not yet assigned an id or timestamps. Accepts the camelCase
    ``suggestedTime`` key returned by the extraction backend.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = PydanticField(min_length=1)
    category: Category
    priority: Priority
    description: str | None = None
    suggested_time: datetime | None = PydanticField(default=None, alias="suggestedTime")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be blank")
        return v


class ReminderCreate(SQLModel):
    """Schema for manual reminder creation.

    ``due_at`` wins when given; otherwise ``due_date`` and ``due_time`` are
    combined only when both are present.
    """

    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    category: Category = Field(default=Category.FOOD)
    priority: Priority = Field(default=Priority.MEDIUM)
    due_date: date | None = None
    due_time: time | None = None
    due_at: datetime | None = None


class IntakeRequest(SQLModel):
    """Schema for AI-assisted creation from free text."""

    text: str = Field(max_length=4000)


class ReminderListResponse(SQLModel):
    """Schema for reminder list response."""

    reminders: list[Reminder]
    total: int


class ReminderStats(SQLModel):
    """Summary counts over the whole store."""

    total: int
    pending: int
    completed: int


class ToggleResponse(SQLModel):
    """Result of a completion toggle; ``completed`` is None when not found."""

    id: UUID
    completed: bool | None


class TipResponse(SQLModel):
    """Short motivating tip for a category."""

    category: Category
    tip: str
