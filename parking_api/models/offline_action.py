# parking_api/models/offline_action.py
"""
Offline action queue — ticket/warning/scan captured without connectivity.
is_synced only ever flips false → true; once synced an action is never
replayed again.
"""

from sqlalchemy import Column, String, DateTime, Boolean, Text, ForeignKey, Index
from parking_api.database import Base


class OfflineAction(Base):
    __tablename__ = "offline_actions"
    __table_args__ = (
        Index("idx_offline_actions_sync", "officer_id", "is_synced", "performed_at"),
    )

    id = Column(String(36), primary_key=True)
    officer_id = Column(String(36), ForeignKey("enforcement_officers.id", ondelete="RESTRICT"), nullable=False)
    action_type = Column(String(20), nullable=False)
    action_data = Column(Text, nullable=False)      # JSON payload, carries the record id
    performed_at = Column(DateTime, nullable=False)
    is_synced = Column(Boolean, default=False, nullable=False)
    synced_at = Column(DateTime)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<OfflineAction {self.id} type={self.action_type} synced={self.is_synced}>"
