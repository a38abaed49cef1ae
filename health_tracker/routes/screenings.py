"""
Defines the API endpoints for a patient's screening history.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..utils.patient_utils import get_patient_or_404

router = APIRouter(prefix="/patients/{patient_id}/screenings", tags=["Screenings"])


@router.post("/", response_model=schemas.ScreeningResponse, status_code=status.HTTP_201_CREATED)
def create_screening(patient_id: int, screening: schemas.ScreeningCreate, db: Session = Depends(get_db)):
    """Records a screening result for a patient."""
    get_patient_or_404(db, patient_id)

    db_screening = models.ScreeningHistory(
        patient_id=patient_id,
        screen_type=screening.screen_type.value,
        result=screening.result,
        result_status=screening.result_status.value,
    )
    try:
        db.add(db_screening)
        db.commit()
        db.refresh(db_screening)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to save screening: {e}")
    return db_screening


@router.get("/", response_model=List[schemas.ScreeningResponse])
def list_screenings(patient_id: int, db: Session = Depends(get_db)):
    """Returns a patient's screenings, newest first."""
    get_patient_or_404(db, patient_id)
    return (
        db.query(models.ScreeningHistory)
        .filter(models.ScreeningHistory.patient_id == patient_id)
        .order_by(models.ScreeningHistory.screened_at.desc(), models.ScreeningHistory.id.desc())
        .all()
    )
