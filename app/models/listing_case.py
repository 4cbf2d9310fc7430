from sqlalchemy import Column, String, Integer, Float, Numeric, Boolean, DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.models.enums import PropertyType, SaleCategory, ListingCaseStatus, enum_values


class ListingCase(Base):
    __tablename__ = "listing_cases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(String(255), nullable=True)
    street = Column(String(50), nullable=False)
    city = Column(String(50), nullable=False)
    state = Column(String(8), nullable=False)
    postcode = Column(Integer, nullable=False)
    longitude = Column(Numeric(9, 6), nullable=False, default=0)
    latitude = Column(Numeric(9, 6), nullable=False, default=0)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    bedrooms = Column(Integer, nullable=False, default=0)
    bathrooms = Column(Integer, nullable=False, default=0)
    garages = Column(Integer, nullable=False, default=0)
    floor_area = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    property_type = Column(Enum(PropertyType, native_enum=False, length=32, values_callable=enum_values), nullable=False)
    sale_category = Column(Enum(SaleCategory, native_enum=False, length=32, values_callable=enum_values), nullable=False)
    listing_case_status = Column(Enum(ListingCaseStatus, native_enum=False, length=32, values_callable=enum_values), nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    agent_assignments = relationship(
        "AgentListingCase", back_populates="listing_case", cascade="all, delete-orphan"
    )
    case_contacts = relationship(
        "CaseContact", back_populates="listing_case", cascade="all, delete-orphan"
    )
    media_assets = relationship("MediaAsset", back_populates="listing_case")

    __table_args__ = (
        Index('idx_listing_case_owner_deleted', 'user_id', 'is_deleted'),
    )


class AgentListingCase(Base):
    __tablename__ = "agent_listing_cases"

    agent_id = Column(String, ForeignKey("agents.id", ondelete="CASCADE"), primary_key=True)
    listing_case_id = Column(Integer, ForeignKey("listing_cases.id", ondelete="CASCADE"), primary_key=True)

    agent = relationship("Agent", back_populates="listing_case_assignments")
    listing_case = relationship("ListingCase", back_populates="agent_assignments")


class CaseContact(Base):
    __tablename__ = "case_contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    company_name = Column(String, nullable=True)
    profile_url = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    listing_case_id = Column(Integer, ForeignKey("listing_cases.id", ondelete="CASCADE"), nullable=False, index=True)

    listing_case = relationship("ListingCase", back_populates="case_contacts")
