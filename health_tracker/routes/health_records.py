"""
Defines the API endpoints for health records (readings).

Submitting a reading stores it and then recalculates the patient's risk.
The two writes are independent: if the recalculation fails the reading is
kept, the failure is logged and the response carries no assessment.
"""

import logging
from datetime import datetime
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..services.risk_assessment import SqlPatientStore, SqlRiskAssessmentStore, recalculate_risk
from ..utils.dates import format_chart_label, utcnow
from ..utils.patient_utils import get_patient_or_404

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health Records"])


@router.post(
    "/health-records",
    response_model=schemas.HealthRecordSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_health_record(record: schemas.HealthRecordCreate, db: Session = Depends(get_db)):
    """
    Stores a new reading for a patient and triggers a risk recalculation.
    """
    patient = get_patient_or_404(db, record.patient_id)

    db_record = models.HealthRecord(**record.model_dump(), recorded_at=utcnow())
    try:
        db.add(db_record)
        db.commit()
        db.refresh(db_record)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to save health record: {e}")

    logger.info("Stored health record %s for patient %s", db_record.id, patient.id)

    assessment = None
    try:
        assessment = recalculate_risk(patient.id, SqlPatientStore(db), SqlRiskAssessmentStore(db))
    except Exception:
        logger.exception("Risk recalculation failed for patient %s", patient.id)

    return schemas.HealthRecordSubmissionResponse(
        record=schemas.HealthRecordResponse.model_validate(db_record),
        risk_assessment=(
            schemas.RiskAssessmentResponse.model_validate(assessment) if assessment is not None else None
        ),
    )


@router.get("/health-records", response_model=List[schemas.PatientLatestRecord])
def get_health_records_overview(db: Session = Depends(get_db)):
    """
    Lists every patient (by last name) alongside their most recent reading.
    """
    # Rank each patient's readings newest first; position 1 is the latest
    ranked = (
        db.query(
            models.HealthRecord.id.label("record_id"),
            models.HealthRecord.patient_id.label("patient_id"),
            func.row_number().over(
                partition_by=models.HealthRecord.patient_id,
                order_by=(models.HealthRecord.recorded_at.desc(), models.HealthRecord.id.desc()),
            ).label("position"),
        )
        .subquery()
    )
    latest_ids = (
        db.query(ranked.c.patient_id, ranked.c.record_id)
        .filter(ranked.c.position == 1)
        .subquery()
    )

    rows = (
        db.query(models.Patient, models.HealthRecord)
        .outerjoin(latest_ids, latest_ids.c.patient_id == models.Patient.id)
        .outerjoin(models.HealthRecord, models.HealthRecord.id == latest_ids.c.record_id)
        .order_by(models.Patient.last_name.asc(), models.Patient.first_name.asc())
        .all()
    )

    overview = []
    for patient, latest in rows:
        overview.append(schemas.PatientLatestRecord(
            id=patient.id,
            first_name=patient.first_name,
            last_name=patient.last_name,
            latest_record=schemas.HealthRecordResponse.model_validate(latest) if latest else None,
        ))
    return overview


def _patient_history(db: Session, patient_id: int, since: Optional[datetime] = None):
    query = db.query(models.HealthRecord).filter(models.HealthRecord.patient_id == patient_id)
    if since is not None:
        query = query.filter(models.HealthRecord.recorded_at >= since)
    return query.order_by(models.HealthRecord.recorded_at.asc(), models.HealthRecord.id.asc()).all()


@router.get("/patients/{patient_id}/health-records", response_model=List[schemas.HealthRecordResponse])
def get_patient_health_records(patient_id: int, db: Session = Depends(get_db)):
    """Returns a patient's full reading history, oldest first."""
    get_patient_or_404(db, patient_id)
    return _patient_history(db, patient_id)


@router.get("/patients/{patient_id}/health-records/chart-data", response_model=schemas.ChartResponse)
def get_patient_chart_data(
        patient_id: int,
        months: Optional[int] = Query(None, ge=1, description="Only include the last N months"),
        db: Session = Depends(get_db),
):
    """
    Returns a patient's reading history formatted for frontend chart
    libraries: one label per reading and one dataset per measurement.
    """
    get_patient_or_404(db, patient_id)

    since = utcnow() - relativedelta(months=months) if months else None
    history = _patient_history(db, patient_id, since)

    labels = [format_chart_label(record.recorded_at) for record in history]
    datasets = [
        {"label": "Blood Glucose (mg/dL)", "data": [record.blood_glucose for record in history]},
        {"label": "Systolic (mmHg)", "data": [record.blood_pressure_systolic for record in history]},
        {"label": "Diastolic (mmHg)", "data": [record.blood_pressure_diastolic for record in history]},
        {"label": "Weight (kg)", "data": [record.weight for record in history]},
    ]
    return {"labels": labels, "datasets": datasets}
