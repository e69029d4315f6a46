# parking_api/models/vehicle.py
"""
Registered vehicles table.
A vehicle is identified by (license_plate, state_province); the pair is unique
across the whole property, enforced by the DB rather than by the application.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, UniqueConstraint
from parking_api.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"
    __table_args__ = (
        UniqueConstraint("license_plate", "state_province", name="uq_vehicles_plate_jurisdiction"),
    )

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    license_plate = Column(String(8), nullable=False, index=True)
    state_province = Column(String(10), nullable=False)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer)
    color = Column(String(50), nullable=False)
    country = Column(String(10), default="US", nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Vehicle {self.license_plate}/{self.state_province} tenant={self.tenant_id}>"
