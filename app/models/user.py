from sqlalchemy import Column, String, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.models.enums import UserRole, enum_values


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    username = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    role = Column(Enum(UserRole, native_enum=False, length=32, values_callable=enum_values), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    agent = relationship("Agent", back_populates="user", uselist=False)
    photography_company = relationship("PhotographyCompany", back_populates="user", uselist=False)


class PhotographyCompany(Base):
    __tablename__ = "photography_companies"

    # Shares the id of its user
    id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    photography_company_name = Column(String, nullable=False)

    user = relationship("User", back_populates="photography_company")
    agent_associations = relationship("AgentPhotographyCompany", back_populates="photography_company")


class Agent(Base):
    __tablename__ = "agents"

    # Shares the id of its user
    id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    agent_first_name = Column(String, nullable=False)
    agent_last_name = Column(String, nullable=False)
    avatar_url = Column(String, nullable=True)
    company_name = Column(String, nullable=False)

    user = relationship("User", back_populates="agent")
    listing_case_assignments = relationship("AgentListingCase", back_populates="agent")
    photography_company_associations = relationship("AgentPhotographyCompany", back_populates="agent")


class AgentPhotographyCompany(Base):
    __tablename__ = "agent_photography_companies"

    agent_id = Column(String, ForeignKey("agents.id", ondelete="CASCADE"), primary_key=True)
    photography_company_id = Column(
        String, ForeignKey("photography_companies.id", ondelete="CASCADE"), primary_key=True
    )

    agent = relationship("Agent", back_populates="photography_company_associations")
    photography_company = relationship("PhotographyCompany", back_populates="agent_associations")
