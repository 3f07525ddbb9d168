# Table models; importing them here populates SQLModel.metadata for Alembic.
from .base import IntegerIdMixin, TimestampMixin  # noqa: F401
from .organization import Organization  # noqa: F401
from .membership import Membership  # noqa: F401
from .user import User  # noqa: F401
