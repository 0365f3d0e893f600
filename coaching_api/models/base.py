# base.py
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Enum
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """created_at / updated_at columns filled on the Python side"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


def value_enum(enum_cls) -> Enum:
    """Enum column type persisting member values rather than names"""
    return Enum(enum_cls, values_callable=lambda members: [m.value for m in members])
