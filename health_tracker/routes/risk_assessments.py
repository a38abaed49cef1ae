"""
Defines the API endpoints for risk assessments.

Assessments are append-only; a patient's current assessment is the most
recently created one.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..exceptions import InvalidReadingError, NoReadingAvailableError
from ..services.risk_assessment import (
    SqlPatientStore,
    SqlRiskAssessmentStore,
    get_current_assessment,
    list_due_assessments,
    recalculate_risk,
)
from ..utils.patient_utils import get_patient_or_404

router = APIRouter(tags=["Risk Assessments"])


@router.get("/patients/{patient_id}/risk-assessments", response_model=List[schemas.RiskAssessmentResponse])
def list_risk_assessments(patient_id: int, db: Session = Depends(get_db)):
    """Returns a patient's assessment history, newest first."""
    get_patient_or_404(db, patient_id)
    return (
        db.query(models.RiskAssessment)
        .filter(models.RiskAssessment.patient_id == patient_id)
        .order_by(models.RiskAssessment.id.desc())
        .all()
    )


@router.get("/patients/{patient_id}/risk-assessments/latest", response_model=schemas.RiskAssessmentResponse)
def get_latest_risk_assessment(patient_id: int, db: Session = Depends(get_db)):
    get_patient_or_404(db, patient_id)
    assessment = get_current_assessment(db, patient_id)
    if assessment is None:
        raise HTTPException(status_code=404, detail=f"No risk assessment found for patient {patient_id}")
    return assessment


@router.post(
    "/patients/{patient_id}/risk-assessments",
    response_model=schemas.RiskAssessmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_risk_assessment(patient_id: int, db: Session = Depends(get_db)):
    """
    Recalculates the patient's risk from their most recent reading and
    appends a new assessment.
    """
    get_patient_or_404(db, patient_id)
    try:
        return recalculate_risk(patient_id, SqlPatientStore(db), SqlRiskAssessmentStore(db))
    except NoReadingAvailableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidReadingError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/risk-assessments/due", response_model=List[schemas.RiskAssessmentResponse])
def get_due_risk_assessments(db: Session = Depends(get_db)):
    """Current assessments whose next assessment date has passed, soonest first."""
    return list_due_assessments(db)
