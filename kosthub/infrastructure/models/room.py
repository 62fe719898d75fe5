"""SQLAlchemy model for rooms and their current tenancy."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Numeric, String

from kosthub.infrastructure.database import Base


class RoomModel(Base):
    """A rentable room; ``tenant_id`` and ``rent_start_date`` describe the tenancy."""

    __tablename__ = "room"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    price = Column(Numeric(12, 2), nullable=False)
    tenant_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    rent_start_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


__all__ = ["RoomModel"]
