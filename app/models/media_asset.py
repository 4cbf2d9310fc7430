from sqlalchemy import Column, String, Integer, Boolean, DateTime, Enum, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.models.enums import MediaType, enum_values


class MediaAsset(Base):
    __tablename__ = "media_assets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    media_type = Column(Enum(MediaType, native_enum=False, length=32, values_callable=enum_values), nullable=False)
    media_url = Column(String, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False)
    is_select = Column(Boolean, default=False, nullable=False)
    is_hero = Column(Boolean, default=False, nullable=False)
    listing_case_id = Column(Integer, ForeignKey("listing_cases.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)

    # Relationships
    listing_case = relationship("ListingCase", back_populates="media_assets")

    # At most one live hero per listing case
    __table_args__ = (
        Index(
            'ux_media_assets_listing_case_hero',
            'listing_case_id',
            unique=True,
            postgresql_where=text("is_hero AND NOT is_deleted"),
            sqlite_where=text("is_hero AND NOT is_deleted"),
        ),
        Index('idx_media_assets_case_selected', 'listing_case_id', 'is_select'),
    )
