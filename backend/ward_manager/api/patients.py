"""Patient discharge endpoints: active roster, visit history, discharge."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from ..core.errors import BackendError, DischargeValidationError
from ..schemas import ActivePatient, DischargeRequest, DischargeResult, Visit
from ..services.lifecycle import search_roster
from ..services.ward import WardService
from .deps import get_ward_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("/active", response_model=List[ActivePatient])
def list_active_patients(
    q: Optional[str] = None,
    service: WardService = Depends(get_ward_service),
):
    """Active roster, most recent admission first. ``q`` matches name or MRN."""
    try:
        patients = service.list_active()
    except BackendError as exc:
        logger.warning("Error fetching active patients: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch active patients")
    return search_roster(patients, q or "")


@router.get("/{mrn}/visits", response_model=List[Visit])
def list_visits(
    mrn: str,
    service: WardService = Depends(get_ward_service),
):
    try:
        return service.list_visits_for(mrn)
    except BackendError as exc:
        logger.warning("Error fetching previous visits for %s: %s", mrn, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch previous visits")


@router.post("/{mrn}/discharge", response_model=DischargeResult)
def discharge_patient(
    mrn: str,
    req: DischargeRequest,
    service: WardService = Depends(get_ward_service),
):
    try:
        return service.discharge(
            mrn, req.discharge_date, req.discharge_time, req.discharge_note, visit_id=req.visit_id
        )
    except DischargeValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.message)
    except BackendError as exc:
        logger.warning("Error discharging patient %s: %s", mrn, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to discharge patient")
