from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

# Day quantities are stored with three decimal places, e.g. 1.250 days.
DAYS_PRECISION = 12
DAYS_SCALE = 3


def _uuid_factory() -> uuid.UUID:
    """Generate a new UUID v4."""
    return uuid.uuid4()


def _now_utc() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


def DaysField(**kwargs: Any) -> Any:  # noqa: N802
    """Field for a fixed-point day quantity, defaulting to zero."""
    return Field(
        default=Decimal("0"),
        sa_type=sa.Numeric(DAYS_PRECISION, DAYS_SCALE),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": "0"},
        **kwargs,
    )


class UUIDBase(SQLModel):
    """Base model with UUID primary key."""

    id: uuid.UUID = Field(
        default_factory=_uuid_factory,
        primary_key=True,
        sa_type=sa.Uuid,
    )


class TimestampMixin(SQLModel):
    """Mixin that adds a created_at timestamp."""

    created_at: datetime = Field(
        default_factory=_now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
