from sqlalchemy import Column, String, Integer, Text, DateTime, Index
from app.database.connection import Base


class CaseHistory(Base):
    """Write-once audit row for listing case changes"""
    __tablename__ = "case_histories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_case_id = Column(Integer, nullable=False, index=True)
    case_title = Column(String, nullable=False)
    change = Column(String(32), nullable=False)
    description = Column(Text, nullable=True)
    user_id = Column(String, nullable=False)
    occurred_at = Column(DateTime(timezone=True), nullable=False)


class MediaAssetHistory(Base):
    """Write-once audit row for media asset changes"""
    __tablename__ = "media_asset_histories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    media_asset_id = Column(Integer, nullable=False, index=True)
    media_url = Column(String, nullable=False)
    listing_case_id = Column(Integer, nullable=False)
    listing_case_title = Column(String, nullable=False)
    change = Column(String(32), nullable=False)
    description = Column(Text, nullable=True)
    user_id = Column(String, nullable=False)
    occurred_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('idx_media_asset_history_case', 'listing_case_id', 'occurred_at'),
    )
