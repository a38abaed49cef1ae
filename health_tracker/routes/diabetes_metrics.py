"""
Defines the API endpoints for diabetes screening metrics.

These are recorded at screening events and, unlike health records, do not
trigger a risk recalculation.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..utils.patient_utils import get_patient_or_404

router = APIRouter(prefix="/patients/{patient_id}/diabetes-metrics", tags=["Diabetes Metrics"])


@router.post("/", response_model=schemas.DiabetesMetricResponse, status_code=status.HTTP_201_CREATED)
def create_diabetes_metric(
        patient_id: int,
        metric: schemas.DiabetesMetricCreate,
        db: Session = Depends(get_db),
):
    get_patient_or_404(db, patient_id)

    db_metric = models.DiabetesMetric(patient_id=patient_id, **metric.model_dump())
    try:
        db.add(db_metric)
        db.commit()
        db.refresh(db_metric)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to save diabetes metrics: {e}")
    return db_metric


@router.get("/", response_model=List[schemas.DiabetesMetricResponse])
def list_diabetes_metrics(patient_id: int, db: Session = Depends(get_db)):
    get_patient_or_404(db, patient_id)
    return (
        db.query(models.DiabetesMetric)
        .filter(models.DiabetesMetric.patient_id == patient_id)
        .order_by(models.DiabetesMetric.recorded_at.desc(), models.DiabetesMetric.id.desc())
        .all()
    )
