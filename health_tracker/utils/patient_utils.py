"""
Contains helpers shared by the patient-scoped routers.
"""

from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from .dates import calculate_age


def get_patient_or_404(db: Session, patient_id: int) -> models.Patient:
    """
    Loads a patient by id.

    Raises:
        HTTPException: 404 if no patient has this id.
    """
    patient = db.query(models.Patient).filter(models.Patient.id == patient_id).first()
    if patient is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient {patient_id} not found"
        )
    return patient


def to_patient_response(patient: models.Patient, risk_level: Optional[str]) -> schemas.PatientResponse:
    """Builds the API representation of a patient, deriving the age from the date of birth."""
    return schemas.PatientResponse(
        id=patient.id,
        first_name=patient.first_name,
        last_name=patient.last_name,
        date_of_birth=patient.date_of_birth,
        age=calculate_age(patient.date_of_birth),
        blood_type=patient.blood_type,
        gender=patient.gender,
        risk_level=risk_level,
        created_at=patient.created_at,
        updated_at=patient.updated_at,
    )
