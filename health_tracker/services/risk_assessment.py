"""
Recalculates a patient's risk after a new reading.

The scorer in `health_tracker.risk` is pure; this module is its caller. It
reads recent readings through a PatientStore, scores the newest one and
appends the result through a RiskAssessmentStore. Both stores are passed in,
so the workflow can run against the database or against in-memory fakes.
"""

import logging
from datetime import datetime
from typing import List, Optional, Protocol, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from ..config import settings
from ..exceptions import NoReadingAvailableError
from ..risk import AssessmentResult, HealthReading, assess
from ..utils.dates import utcnow

logger = logging.getLogger(__name__)


class PatientStore(Protocol):
    def latest_readings(self, patient_id: int, limit: int) -> Sequence[models.HealthRecord]:
        """Most recent readings for a patient, newest first."""
        ...


class RiskAssessmentStore(Protocol):
    def append(self, assessment: AssessmentResult) -> models.RiskAssessment:
        """Persists a new assessment; existing ones are never modified."""
        ...


class SqlPatientStore:
    """PatientStore backed by the health_records table."""

    def __init__(self, db: Session):
        self.db = db

    def latest_readings(self, patient_id: int, limit: int) -> List[models.HealthRecord]:
        return (
            self.db.query(models.HealthRecord)
            .filter(models.HealthRecord.patient_id == patient_id)
            .order_by(models.HealthRecord.recorded_at.desc(), models.HealthRecord.id.desc())
            .limit(limit)
            .all()
        )


class SqlRiskAssessmentStore:
    """RiskAssessmentStore backed by the append-only risk_assessments table."""

    def __init__(self, db: Session):
        self.db = db

    def append(self, assessment: AssessmentResult) -> models.RiskAssessment:
        db_assessment = models.RiskAssessment(
            patient_id=assessment.patient_id,
            risk_level=assessment.risk_level.value,
            calculated_score=assessment.calculated_score,
            assessment_date=assessment.assessment_date,
            next_assessment_date=assessment.next_assessment_date,
        )
        try:
            self.db.add(db_assessment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_assessment)
        return db_assessment


def recalculate_risk(
    patient_id: int,
    patient_store: PatientStore,
    assessment_store: RiskAssessmentStore,
    now: Optional[datetime] = None,
    history_window: Optional[int] = None,
):
    """
    Scores a patient's newest reading and appends the assessment.

    Up to `history_window` readings are fetched (RISK_HISTORY_WINDOW by
    default) but only the newest is scored; older readings do not influence
    the result.

    Raises:
        NoReadingAvailableError: If the patient has no readings; nothing is scored.
        InvalidReadingError: If the newest reading is missing a required value.

    Returns:
        Whatever the assessment store returns for the appended assessment.
    """
    window = settings.RISK_HISTORY_WINDOW if history_window is None else history_window
    readings = patient_store.latest_readings(patient_id, window)
    if not readings:
        raise NoReadingAvailableError(patient_id)

    reading = HealthReading.from_record(readings[0])
    result = assess(reading, patient_id, now or utcnow())

    stored = assessment_store.append(result)
    logger.info(
        "Risk assessment for patient %s: score=%s level=%s next=%s",
        patient_id,
        result.calculated_score,
        result.risk_level.value,
        result.next_assessment_date.date().isoformat(),
    )
    return stored


# --- Current assessment queries ---

def current_assessment_ids(db: Session):
    """
    Subquery of (patient_id, assessment_id) for each patient's current
    assessment, i.e. the most recently created one.
    """
    return (
        db.query(
            models.RiskAssessment.patient_id.label("patient_id"),
            func.max(models.RiskAssessment.id).label("assessment_id"),
        )
        .group_by(models.RiskAssessment.patient_id)
        .subquery()
    )


def get_current_assessment(db: Session, patient_id: int) -> Optional[models.RiskAssessment]:
    return (
        db.query(models.RiskAssessment)
        .filter(models.RiskAssessment.patient_id == patient_id)
        .order_by(models.RiskAssessment.id.desc())
        .first()
    )


def list_due_assessments(db: Session, now: Optional[datetime] = None) -> List[models.RiskAssessment]:
    """Current assessments whose follow-up date has arrived, soonest first."""
    current = current_assessment_ids(db)
    return (
        db.query(models.RiskAssessment)
        .join(current, models.RiskAssessment.id == current.c.assessment_id)
        .filter(models.RiskAssessment.next_assessment_date <= (now or utcnow()))
        .order_by(models.RiskAssessment.next_assessment_date.asc())
        .all()
    )
