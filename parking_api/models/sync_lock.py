# parking_api/models/sync_lock.py
"""
One row per officer while a reconciliation run is in flight.
The primary key makes a second concurrent run fail on insert.
"""

from sqlalchemy import Column, String, DateTime
from parking_api.database import Base


class SyncLock(Base):
    __tablename__ = "sync_locks"

    officer_id = Column(String(36), primary_key=True)
    acquired_at = Column(DateTime, nullable=False)
    token = Column(String(36), nullable=False)

    def __repr__(self):
        return f"<SyncLock officer={self.officer_id} since={self.acquired_at}>"
