"""SQLAlchemy ORM models for clients, staff, work logs, payments and hour requests"""

import uuid
from sqlalchemy import Column, String, Float, DateTime, Date, ForeignKey, Numeric, Text, Uuid, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Admin(Base):
    """Staff member who can be assigned to clients as point of contact"""

    __tablename__ = "admins"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    contact_number = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    assignments = relationship("ClientAdmin", back_populates="admin", cascade="all, delete-orphan")
    primary_clients = relationship("Client", foreign_keys="Client.ting_poc_primary", viewonly=True)
    secondary_clients = relationship("Client", foreign_keys="Client.ting_poc_secondary", viewonly=True)


class Client(Base):
    """AMC client with its contract terms"""

    __tablename__ = "clients"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_slug = Column(String(120), nullable=False, unique=True)
    project_name = Column(Text, nullable=True)
    client_name = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    poc_email = Column(Text, nullable=True)
    cost_for_year = Column(Numeric(14, 2, asdecimal=False), nullable=True)
    hours_assigned_year = Column(Float, nullable=True)
    payment_term = Column(Text, nullable=True)  # Monthly | Quarterly | Half-Yearly | Yearly
    amc_start_date = Column(Date, nullable=True)
    amc_end_date = Column(Date, nullable=True)
    ting_poc_primary = Column(Uuid(as_uuid=True), ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)
    ting_poc_secondary = Column(Uuid(as_uuid=True), ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    primary_poc = relationship("Admin", foreign_keys=[ting_poc_primary])
    secondary_poc = relationship("Admin", foreign_keys=[ting_poc_secondary])
    assignments = relationship("ClientAdmin", back_populates="client", cascade="all, delete-orphan")
    work_logs = relationship("WorkLog", back_populates="client", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="client", cascade="all, delete-orphan")
    hour_requests = relationship("HourRequest", back_populates="client", cascade="all, delete-orphan")


class ClientAdmin(Base):
    """Assignment of an admin to a client"""

    __tablename__ = "client_admins"
    __table_args__ = (UniqueConstraint("client_id", "admin_id"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    admin_id = Column(Uuid(as_uuid=True), ForeignKey("admins.id", ondelete="CASCADE"), nullable=False)

    client = relationship("Client", back_populates="assignments")
    admin = relationship("Admin", back_populates="assignments")


class WorkLog(Base):
    """Hours of work performed for a client"""

    __tablename__ = "work_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    work_description = Column(Text, nullable=False)
    hours_consumed = Column(Float, nullable=False, default=0)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="work_logs")


class Payment(Base):
    """Payment received from a client"""

    __tablename__ = "payments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    amount_paid = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    payment_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    client = relationship("Client", back_populates="payments")


class HourRequest(Base):
    """Request for additional hours on a client's contract"""

    __tablename__ = "hour_requests"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    requested_hours = Column(Float, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="hour_requests")
