"""
Risk scoring for a single health reading.

The score is a heuristic over blood glucose and blood pressure thresholds,
mapped to a risk level that in turn fixes how many days until the patient
should be assessed again. Everything here is pure: the caller supplies the
patient id and the clock, and persists the result.
"""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidReadingError
from .schemas import RiskLevel

# Glucose thresholds (mg/dL). Comparisons are strict, so 70 and 140 score zero.
GLUCOSE_VERY_HIGH = 200
GLUCOSE_HIGH = 140
GLUCOSE_LOW = 70

# Blood pressure limits (mmHg), either one being exceeded counts once.
SYSTOLIC_LIMIT = 140
DIASTOLIC_LIMIT = 90

HIGH_RISK_MIN_SCORE = 4
MEDIUM_RISK_MIN_SCORE = 2

REASSESSMENT_INTERVAL_DAYS = {
    RiskLevel.HIGH: 30,
    RiskLevel.MEDIUM: 60,
    RiskLevel.LOW: 90,
}


class HealthReading(BaseModel):
    """The values of one recorded reading that the scorer looks at."""

    model_config = ConfigDict(frozen=True)

    blood_glucose: float = Field(allow_inf_nan=False)
    blood_pressure_systolic: int
    blood_pressure_diastolic: int
    recorded_at: datetime

    @classmethod
    def from_record(cls, record: Any) -> "HealthReading":
        """
        Builds a reading from a stored health record (or any object with the
        same attributes).

        Raises:
            InvalidReadingError: If a required value is missing or not numeric.
        """
        try:
            return cls(
                blood_glucose=getattr(record, "blood_glucose", None),
                blood_pressure_systolic=getattr(record, "blood_pressure_systolic", None),
                blood_pressure_diastolic=getattr(record, "blood_pressure_diastolic", None),
                recorded_at=getattr(record, "recorded_at", None),
            )
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise InvalidReadingError(f"Reading cannot be scored, invalid fields: {fields}") from e


class AssessmentResult(BaseModel):
    """An assessment ready to be appended to a patient's history."""

    model_config = ConfigDict(frozen=True)

    patient_id: int
    risk_level: RiskLevel
    calculated_score: int
    assessment_date: datetime
    next_assessment_date: datetime


def glucose_points(blood_glucose: float) -> int:
    if blood_glucose > GLUCOSE_VERY_HIGH:
        return 3
    if blood_glucose > GLUCOSE_HIGH:
        return 2
    if blood_glucose < GLUCOSE_LOW:
        return 3
    return 0


def blood_pressure_points(systolic: int, diastolic: int) -> int:
    if systolic > SYSTOLIC_LIMIT or diastolic > DIASTOLIC_LIMIT:
        return 2
    return 0


def calculate_score(reading: HealthReading) -> int:
    """Total risk score for a reading, between 0 and 5."""
    return glucose_points(reading.blood_glucose) + blood_pressure_points(
        reading.blood_pressure_systolic, reading.blood_pressure_diastolic
    )


def risk_level_for_score(score: int) -> RiskLevel:
    if score >= HIGH_RISK_MIN_SCORE:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_MIN_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def next_assessment_date(risk_level: RiskLevel, assessed_at: datetime) -> datetime:
    """Date of the follow-up assessment: 30, 60 or 90 days out depending on the level."""
    return assessed_at + timedelta(days=REASSESSMENT_INTERVAL_DAYS[risk_level])


def assess(reading: HealthReading, patient_id: int, now: datetime) -> AssessmentResult:
    """
    Scores a single reading and schedules the next assessment.

    Args:
        reading: The patient's most recent reading.
        patient_id: The patient the assessment belongs to.
        now: The assessment time; also the base for the follow-up date.

    Returns:
        AssessmentResult: Score, level and dates. Nothing is persisted.
    """
    score = calculate_score(reading)
    level = risk_level_for_score(score)
    return AssessmentResult(
        patient_id=patient_id,
        risk_level=level,
        calculated_score=score,
        assessment_date=now,
        next_assessment_date=next_assessment_date(level, now),
    )
