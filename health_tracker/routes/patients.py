"""
Defines all API endpoints for managing patients.

List views show each patient's derived age and their current risk level,
which is the level of their most recently created risk assessment.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import case, or_
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import settings
from ..database import get_db
from ..services.risk_assessment import current_assessment_ids, get_current_assessment
from ..utils.patient_utils import get_patient_or_404, to_patient_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Patients"])


def _parse_risk_filter(risk: Optional[str]) -> Optional[schemas.RiskLevel]:
    if not risk:
        return None
    try:
        return schemas.RiskLevel(risk.strip().upper())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid risk filter '{risk}'. Use low, medium or high."
        )


@router.post("/", response_model=schemas.PatientResponse, status_code=status.HTTP_201_CREATED)
def create_patient(patient: schemas.PatientCreate, db: Session = Depends(get_db)):
    """
    Registers a new patient. A new patient has no risk level until their
    first health record is submitted.
    """
    db_patient = models.Patient(
        first_name=patient.first_name,
        last_name=patient.last_name,
        date_of_birth=patient.date_of_birth,
        blood_type=patient.blood_type.value if patient.blood_type else None,
        gender=patient.gender.value if patient.gender else None,
    )
    try:
        db.add(db_patient)
        db.commit()
        db.refresh(db_patient)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to create patient: {e}")

    logger.info("Created patient %s", db_patient.id)
    return to_patient_response(db_patient, None)


@router.get("/", response_model=List[schemas.PatientResponse])
def list_patients(
        sort: schemas.PatientSort = schemas.PatientSort.RECENT,
        risk: Optional[str] = None,
        db: Session = Depends(get_db),
):
    """
    Lists patients with their current risk level.

    Sorting: `recent` (newest first), `name` (last then first name) or `risk`
    (HIGH, MEDIUM, LOW, then patients never assessed). The optional `risk`
    filter is case-insensitive and never matches unassessed patients.
    """
    risk_filter = _parse_risk_filter(risk)

    # Join each patient to their current assessment, if any
    current = current_assessment_ids(db)
    query = (
        db.query(models.Patient, models.RiskAssessment.risk_level)
        .outerjoin(current, current.c.patient_id == models.Patient.id)
        .outerjoin(models.RiskAssessment, models.RiskAssessment.id == current.c.assessment_id)
    )

    if risk_filter is not None:
        query = query.filter(models.RiskAssessment.risk_level == risk_filter.value)

    if sort == schemas.PatientSort.NAME:
        query = query.order_by(models.Patient.last_name.asc(), models.Patient.first_name.asc())
    elif sort == schemas.PatientSort.RISK:
        severity = case(
            (models.RiskAssessment.risk_level == schemas.RiskLevel.HIGH.value, 0),
            (models.RiskAssessment.risk_level == schemas.RiskLevel.MEDIUM.value, 1),
            (models.RiskAssessment.risk_level == schemas.RiskLevel.LOW.value, 2),
            else_=3,
        )
        query = query.order_by(severity, models.Patient.last_name.asc(), models.Patient.first_name.asc())
    else:
        query = query.order_by(models.Patient.created_at.desc(), models.Patient.id.desc())

    return [to_patient_response(patient, risk_level) for patient, risk_level in query.all()]


@router.get("/search", response_model=List[schemas.PatientSearchResult])
def search_patients(q: str = "", db: Session = Depends(get_db)):
    """
    Finds patients whose first or last name contains the term, or whose id
    equals it. A blank term returns nothing.
    """
    term = q.strip()
    if not term:
        return []

    conditions = [
        models.Patient.first_name.ilike(f"%{term}%"),
        models.Patient.last_name.ilike(f"%{term}%"),
    ]
    try:
        conditions.append(models.Patient.id == int(term))
    except ValueError:
        # Not a number, match on names only
        pass

    return (
        db.query(models.Patient)
        .filter(or_(*conditions))
        .order_by(models.Patient.last_name.asc(), models.Patient.first_name.asc())
        .limit(settings.SEARCH_RESULT_LIMIT)
        .all()
    )


@router.get("/{patient_id}", response_model=schemas.PatientResponse)
def get_patient(patient_id: int, db: Session = Depends(get_db)):
    """Fetches a single patient with their current risk level."""
    patient = get_patient_or_404(db, patient_id)
    current = get_current_assessment(db, patient_id)
    return to_patient_response(patient, current.risk_level if current else None)


@router.patch("/{patient_id}", response_model=schemas.PatientResponse)
def update_patient(patient_id: int, update: schemas.PatientUpdate, db: Session = Depends(get_db)):
    """Updates only the fields present in the request body."""
    patient = get_patient_or_404(db, patient_id)

    changes = update.model_dump(exclude_unset=True)
    for field, value in changes.items():
        # Enum members are stored by their value
        setattr(patient, field, getattr(value, "value", value))

    try:
        db.commit()
        db.refresh(patient)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to update patient: {e}")

    current = get_current_assessment(db, patient_id)
    return to_patient_response(patient, current.risk_level if current else None)


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_patient(patient_id: int, db: Session = Depends(get_db)):
    """Deletes a patient together with all of their records and assessments."""
    patient = get_patient_or_404(db, patient_id)
    try:
        db.delete(patient)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete patient: {e}")
    logger.info("Deleted patient %s", patient_id)
    return
