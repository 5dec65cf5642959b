from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

USER_ROLES = ("admin", "teacher", "client")
SERVICE_TYPES = ("training", "daycare", "boarding", "other")
APPOINTMENT_STATUSES = ("pending", "confirmed", "completed", "cancelled", "no_show")


class Business(Base):
    """A dog-training business (tenant). Every record below belongs to one."""

    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    users = relationship("User", back_populates="business")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=True)  # Null until an admin sets one
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    profile_image_key = Column(String(500), nullable=True)
    role = Column(String(20), default="client", nullable=False)  # admin, teacher, client
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    business = relationship("Business", back_populates="users")
    client = relationship("Client", back_populates="user", uselist=False)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Client(Base):
    """Customer of the business (dog owner)"""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, unique=True)  # Portal access
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="client")
    dogs = relationship("Dog", back_populates="client", cascade="all, delete")
    appointments = relationship(
        "Appointment", back_populates="client", cascade="all, delete"
    )
    invoices = relationship("Invoice", back_populates="client", cascade="all, delete")
    payments = relationship("Payment", back_populates="client", cascade="all, delete")
    packages = relationship("Package", back_populates="client", cascade="all, delete")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PetType(Base):
    __tablename__ = "pet_types"
    __table_args__ = (UniqueConstraint("business_id", "name", name="uq_pet_type_business_name"),)

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Dog(Base):
    __tablename__ = "dogs"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    pet_type_id = Column(Integer, ForeignKey("pet_types.id"), nullable=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # Assigned trainer
    name = Column(String(255), nullable=False)
    breed = Column(String(255), nullable=True)
    age = Column(Integer, nullable=True)
    weight = Column(Numeric(6, 2), nullable=True)
    notes = Column(Text, nullable=True)
    image_key = Column(String(500), nullable=True)  # Object storage key of the dog's photo
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="dogs")
    pet_type = relationship("PetType")
    teacher = relationship("User")
    appointments = relationship("Appointment", back_populates="dog", cascade="all, delete")
    medical_records = relationship(
        "MedicalRecord", back_populates="dog", cascade="all, delete"
    )
    training_sessions = relationship(
        "TrainingSession", back_populates="dog", cascade="all, delete"
    )
    evidence = relationship("Evidence", back_populates="dog", cascade="all, delete")
    progress_entries = relationship(
        "ProgressEntry", back_populates="dog", cascade="all, delete"
    )
    assessments = relationship("Assessment", back_populates="dog", cascade="all, delete")

    @property
    def pet_type_name(self):
        return self.pet_type.name if self.pet_type else None


class Service(Base):
    """Catalog entry: training, daycare, boarding, ..."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # training, daycare, boarding, other
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=True)  # in minutes
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    appointment_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), default="pending", nullable=False)
    notes = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="appointments")
    dog = relationship("Dog", back_populates="appointments")
    service = relationship("Service")
    teacher = relationship("User")
