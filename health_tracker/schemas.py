"""
Defines Pydantic schemas for API data validation and serialization.

These models act as the data contract for the API. The numeric bounds on
readings are the only validation a reading gets before it is scored.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class RiskLevel(str, Enum):
    """Coarse three-band classification derived from a reading."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class BloodType(str, Enum):
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"


class PatientSort(str, Enum):
    """Orderings offered by the patient list."""
    RECENT = "recent"
    NAME = "name"
    RISK = "risk"


class ScreenType(str, Enum):
    BLOOD_GLUCOSE_TEST = "Blood Glucose Test"
    BLOOD_PRESSURE_CHECK = "Blood Pressure Check"
    HBA1C_TEST = "HbA1c Test"
    LIPID_PANEL = "Lipid Panel"
    KIDNEY_FUNCTION_TEST = "Kidney Function Test"


class ResultStatus(str, Enum):
    NORMAL = "Normal"
    HIGH = "High"
    LOW = "Low"
    CRITICAL = "Critical"


def _blank_to_none(value):
    # Form selects submit "" for "not chosen"
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _not_in_future(value: Optional[date]) -> Optional[date]:
    if value is not None and value > date.today():
        raise ValueError("Date of birth cannot be in the future")
    return value


# --- Schemas for Patients ---
class PatientCreate(BaseModel):
    """Schema for registering a new patient."""
    first_name: str = Field(..., min_length=2, description="First name is required")
    last_name: str = Field(..., min_length=2, description="Last name is required")
    date_of_birth: date
    blood_type: Optional[BloodType] = None
    gender: Optional[Gender] = None

    @field_validator("blood_type", "gender", mode="before")
    @classmethod
    def empty_choice_is_none(cls, v):
        return _blank_to_none(v)

    @field_validator("date_of_birth")
    @classmethod
    def date_of_birth_not_in_future(cls, v):
        return _not_in_future(v)


class PatientUpdate(BaseModel):
    """Schema for a partial patient update; omitted fields are left untouched."""
    first_name: Optional[str] = Field(None, min_length=2)
    last_name: Optional[str] = Field(None, min_length=2)
    date_of_birth: Optional[date] = None
    blood_type: Optional[BloodType] = None
    gender: Optional[Gender] = None

    @field_validator("blood_type", "gender", mode="before")
    @classmethod
    def empty_choice_is_none(cls, v):
        return _blank_to_none(v)

    @field_validator("first_name", "last_name", "date_of_birth", mode="before")
    @classmethod
    def required_field_not_null(cls, v, info):
        # These columns are NOT NULL; they may be omitted but never cleared
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def date_of_birth_not_in_future(cls, v):
        return _not_in_future(v)


class PatientResponse(BaseModel):
    """Schema for patient rows, including the derived age and current risk level."""
    id: int
    first_name: str
    last_name: str
    date_of_birth: date
    age: int
    blood_type: Optional[BloodType] = None
    gender: Optional[Gender] = None
    risk_level: Optional[RiskLevel] = None
    created_at: datetime
    updated_at: datetime


class PatientSearchResult(BaseModel):
    """Slim schema returned by the patient search box."""
    id: int
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


# --- Schemas for Health Records ---
class HealthRecordCreate(BaseModel):
    """Schema for a new reading. Bounds mirror the entry form's limits."""
    patient_id: int
    blood_glucose: float = Field(..., ge=0, le=999, allow_inf_nan=False, description="mg/dL")
    blood_pressure_systolic: int = Field(..., ge=70, le=250, description="mmHg")
    blood_pressure_diastolic: int = Field(..., ge=40, le=150, description="mmHg")
    weight: Optional[float] = Field(None, gt=0, allow_inf_nan=False, description="kg")
    notes: Optional[str] = None


class HealthRecordResponse(BaseModel):
    id: int
    patient_id: int
    blood_glucose: float
    blood_pressure_systolic: int
    blood_pressure_diastolic: int
    weight: Optional[float] = None
    notes: Optional[str] = None
    recorded_at: datetime

    class Config:
        from_attributes = True


class PatientLatestRecord(BaseModel):
    """One row of the health-records overview: a patient and their newest reading."""
    id: int
    first_name: str
    last_name: str
    latest_record: Optional[HealthRecordResponse] = None


# --- Schemas for Risk Assessments ---
class RiskAssessmentResponse(BaseModel):
    id: int
    patient_id: int
    risk_level: RiskLevel
    calculated_score: int
    assessment_date: datetime
    next_assessment_date: datetime

    class Config:
        from_attributes = True


class HealthRecordSubmissionResponse(BaseModel):
    """The stored reading plus the assessment it triggered (null if that step failed)."""
    record: HealthRecordResponse
    risk_assessment: Optional[RiskAssessmentResponse] = None


# --- Schemas for Screenings ---
class ScreeningCreate(BaseModel):
    screen_type: ScreenType
    result: float = Field(..., ge=0, le=999.99, allow_inf_nan=False)
    result_status: ResultStatus


class ScreeningResponse(BaseModel):
    id: int
    patient_id: int
    screen_type: ScreenType
    result: float
    result_status: ResultStatus
    screened_at: datetime

    class Config:
        from_attributes = True


# --- Schemas for Diabetes Metrics ---
class DiabetesMetricCreate(BaseModel):
    blood_glucose_level: float = Field(..., ge=0, le=999.99, allow_inf_nan=False)
    blood_pressure_systolic: int = Field(..., ge=70, le=250)
    blood_pressure_diastolic: int = Field(..., ge=40, le=150)
    bmi: Optional[float] = Field(None, ge=10, le=99.99, allow_inf_nan=False)
    screen_location: str = Field(..., min_length=1, description="Screen location is required")
    record_by: str = Field(..., min_length=1, description="Record by is required")


class DiabetesMetricResponse(BaseModel):
    id: int
    patient_id: int
    blood_glucose_level: float
    blood_pressure_systolic: int
    blood_pressure_diastolic: int
    bmi: Optional[float] = None
    screen_location: str
    record_by: str
    recorded_at: datetime

    class Config:
        from_attributes = True


# --- Schemas for Charts ---
class ChartDataset(BaseModel):
    """Schema for a dataset within a chart response."""
    label: str
    data: List[Optional[float]]


class ChartResponse(BaseModel):
    """Schema for providing data formatted for charting libraries."""
    labels: List[str]
    datasets: List[ChartDataset]
