# parking_api/models/tenant.py
"""
Tenants table — residents who own vehicles and submit permit requests.
Looked up by email during the combined permit application flow.
"""

from sqlalchemy import Column, String, DateTime, Boolean
from parking_api.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(50))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    unit_number = Column(String(50), nullable=False, default="", index=True)
    building_code = Column(String(50))
    full_address = Column(String(500))
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Tenant {self.id} email={self.email} unit={self.unit_number}>"
