"""Organization model."""

from sqlmodel import Field, SQLModel

from .base import IntegerIdMixin, TimestampMixin


class Organization(IntegerIdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    name: str = Field(nullable=False, index=True)
