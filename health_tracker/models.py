"""
Defines the SQLAlchemy ORM models for the database tables.

A patient owns their health records, risk assessments, screenings and
diabetes metrics; deleting the patient removes all of them.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from .database import Base
from .utils.dates import utcnow


class Patient(Base):
    """Represents the 'patients' table in the database."""
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, index=True)
    date_of_birth = Column(Date, nullable=False)
    blood_type = Column(String(3), nullable=True)
    gender = Column(String(1), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    health_records = relationship(
        "HealthRecord", back_populates="patient", cascade="all, delete-orphan"
    )
    risk_assessments = relationship(
        "RiskAssessment", back_populates="patient", cascade="all, delete-orphan"
    )
    screenings = relationship(
        "ScreeningHistory", back_populates="patient", cascade="all, delete-orphan"
    )
    diabetes_metrics = relationship(
        "DiabetesMetric", back_populates="patient", cascade="all, delete-orphan"
    )


class HealthRecord(Base):
    """Represents the 'health_records' table: one reading per row, never edited."""
    __tablename__ = "health_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), index=True, nullable=False)

    # Core reading values
    blood_glucose = Column(Float, nullable=False)  # mg/dL
    blood_pressure_systolic = Column(Integer, nullable=False)  # mmHg
    blood_pressure_diastolic = Column(Integer, nullable=False)  # mmHg

    weight = Column(Float, nullable=True)  # kg
    notes = Column(Text, nullable=True)

    recorded_at = Column(DateTime, default=utcnow, index=True, nullable=False)

    patient = relationship("Patient", back_populates="health_records")


class RiskAssessment(Base):
    """Represents the append-only 'risk_assessments' table."""
    __tablename__ = "risk_assessments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), index=True, nullable=False)

    risk_level = Column(String(6), nullable=False)  # LOW / MEDIUM / HIGH
    calculated_score = Column(Integer, nullable=False)
    assessment_date = Column(DateTime, default=utcnow, nullable=False)
    next_assessment_date = Column(DateTime, nullable=False)

    patient = relationship("Patient", back_populates="risk_assessments")


class ScreeningHistory(Base):
    """Represents the 'screening_history' table."""
    __tablename__ = "screening_history"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), index=True, nullable=False)

    screen_type = Column(String, nullable=False)
    result = Column(Float, nullable=False)
    result_status = Column(String, nullable=False)

    screened_at = Column(DateTime, default=utcnow, nullable=False)

    patient = relationship("Patient", back_populates="screenings")


class DiabetesMetric(Base):
    """Represents the 'diabetes_metrics' table."""
    __tablename__ = "diabetes_metrics"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), index=True, nullable=False)

    blood_glucose_level = Column(Float, nullable=False)
    blood_pressure_systolic = Column(Integer, nullable=False)
    blood_pressure_diastolic = Column(Integer, nullable=False)
    bmi = Column(Float, nullable=True)

    # Where the screening happened and who took the measurement
    screen_location = Column(String, nullable=False)
    record_by = Column(String, nullable=False)

    recorded_at = Column(DateTime, default=utcnow, nullable=False)

    patient = relationship("Patient", back_populates="diabetes_metrics")
