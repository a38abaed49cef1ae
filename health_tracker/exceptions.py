"""
Errors raised around the risk assessment workflow.
"""


class RiskAssessmentError(Exception):
    """Base class for risk assessment failures."""


class InvalidReadingError(RiskAssessmentError, ValueError):
    """A reading is missing a required value or holds a non-numeric one."""


class NoReadingAvailableError(RiskAssessmentError):
    """An assessment was requested for a patient with no recorded readings."""

    def __init__(self, patient_id: int):
        self.patient_id = patient_id
        super().__init__(f"No health readings recorded for patient {patient_id}")
