"""Domain model."""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from pushhub.database import Base
from pushhub.models.enums import DomainStatus
from pushhub.models.mixins import TimestampMixin


class Domain(Base, TimestampMixin):
    """A website origin registered by a client."""

    __tablename__ = "domains"
    __table_args__ = (UniqueConstraint("client_id", "domain_name", name="uq_client_domain"),)

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(
        Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    domain_name = Column(String(253), nullable=False)  # hostname[:port], localhost or IPv4
    status = Column(String(20), nullable=False, default=DomainStatus.ACTIVE.value)

    # Relationships
    client = relationship("Client", back_populates="domains")
