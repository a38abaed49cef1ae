# health_tracker/scheduler.py

import logging

from .database import SessionLocal
from .services.risk_assessment import list_due_assessments
from .utils.dates import utcnow

logger = logging.getLogger(__name__)


def log_due_risk_assessments(session_factory=SessionLocal):
    """
    Logs every patient whose current risk assessment is due for renewal.

    Returns the number of due assessments found.
    """
    db = session_factory()
    try:
        now = utcnow()
        logger.info(f"Checking for risk assessments due on or before {now.strftime('%Y-%m-%d')}.")

        due = list_due_assessments(db, now)
        for assessment in due:
            logger.info(
                f"Patient {assessment.patient_id} is due for reassessment "
                f"(level {assessment.risk_level}, due {assessment.next_assessment_date.strftime('%Y-%m-%d')})."
            )

        logger.info(f"Due assessment check complete. {len(due)} patient(s) need reassessment.")
        return len(due)

    except Exception as e:
        logger.error(f"Error during scheduled due assessment check: {e}")
        return 0
    finally:
        db.close()
