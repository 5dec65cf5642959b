"""
Dog history models: medical records, training sessions, evidence,
progress entries and behavioural assessments. Also training protocols
and staff tasks.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

MEDICAL_RECORD_TYPES = ("vacuna", "revision", "medicamento", "cirugia", "emergencia", "otro")
EVIDENCE_TYPES = ("photo", "video", "document", "note")
PROTOCOL_CATEGORIES = (
    "obediencia_basica",
    "comportamiento",
    "socializacion",
    "agilidad",
    "terapia",
    "rescate",
    "otro",
)
TASK_TYPES = ("class", "training", "meeting", "administrative", "other")
TASK_STATUSES = ("pending", "in_progress", "completed", "cancelled")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False, index=True)
    record_date = Column(DateTime, nullable=False)
    record_type = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    veterinarian = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    medications = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    dog = relationship("Dog", back_populates="medical_records")


class TrainingSession(Base):
    """A single training session a teacher ran with a dog"""

    __tablename__ = "training_sessions"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    session_date = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, nullable=True)  # in minutes
    objective = Column(Text, nullable=True)
    activities = Column(Text, nullable=True)
    progress = Column(Text, nullable=True)
    behavior_notes = Column(Text, nullable=True)
    next_steps = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)  # 1-5
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    dog = relationship("Dog", back_populates="training_sessions")
    teacher = relationship("User")
    evidence = relationship("Evidence", back_populates="training_session")


class Evidence(Base):
    __tablename__ = "evidence"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False, index=True)
    training_session_id = Column(
        Integer, ForeignKey("training_sessions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    type = Column(String(20), nullable=False)  # photo, video, document, note
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    file_key = Column(String(500), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    dog = relationship("Dog", back_populates="evidence")
    training_session = relationship("TrainingSession", back_populates="evidence")


class ProgressEntry(Base):
    __tablename__ = "progress_entries"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False, index=True)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    photos = Column(JSON, nullable=True)  # list of storage keys
    videos = Column(JSON, nullable=True)  # list of storage keys
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    dog = relationship("Dog", back_populates="progress_entries")


class Assessment(Base):
    """Behavioural assessment: 1-5 scores per indicator plus section comments"""

    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False, index=True)
    assessment_date = Column(DateTime, nullable=False)
    scores = Column(JSON, nullable=False, default=dict)
    comments = Column(JSON, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    dog = relationship("Dog", back_populates="assessments")


class Protocol(Base):
    """Reusable training protocol with ordered steps"""

    __tablename__ = "protocols"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(30), nullable=False)
    objectives = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    duration = Column(String(100), nullable=True)  # free text, e.g. "4 semanas"
    steps = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(20), nullable=False, default="other")
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    start_at = Column(DateTime, nullable=False, index=True)
    end_at = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    priority = Column(String(20), nullable=False, default="medium")
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    assignee = relationship("User", foreign_keys=[assigned_to])
