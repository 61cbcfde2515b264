"""User model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from pushhub.database import Base
from pushhub.models.enums import UserRole
from pushhub.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication; client users belong to one tenant."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.CLIENT.value, index=True)
    client_id = Column(
        Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True
    )

    # Relationships
    client = relationship("Client", back_populates="users")

    @property
    def is_master(self) -> bool:
        """Check if the user is a master administrator."""
        return self.role == UserRole.MASTER.value
