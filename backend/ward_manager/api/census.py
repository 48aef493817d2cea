"""Daily report management endpoints: census, PDF export, daily reports."""
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from typing import List, Optional

from ..core.errors import BackendError
from ..schemas import CensusPatient, DailyReportEntry
from ..services.report_generator import report_filename, report_generator
from ..services.ward import WardService
from .deps import get_ward_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["census"])


def _census(service: WardService, day: Optional[date], specialty: Optional[str]):
    try:
        return service.census(day or service.today(), specialty)
    except BackendError as exc:
        logger.warning("Error fetching patients: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch patients")


@router.get("/census", response_model=List[CensusPatient])
def get_census(
    day: Optional[date] = Query(None, alias="date", description="Admission day (defaults to today)"),
    specialty: Optional[str] = Query(None, description="Narrow to one specialty"),
    service: WardService = Depends(get_ward_service),
):
    """Patients admitted on a day, including those discharged within the visibility window."""
    return _census(service, day, specialty)


@router.get("/census/report.pdf")
def export_census_report(
    day: Optional[date] = Query(None, alias="date"),
    specialty: Optional[str] = Query(None),
    service: WardService = Depends(get_ward_service),
):
    day = day or service.today()
    patients = _census(service, day, specialty)
    pdf = report_generator.generate(patients, day, specialty)
    filename = report_filename(day, specialty)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/daily-reports", response_model=List[DailyReportEntry])
def list_daily_reports(
    day: Optional[date] = Query(None, alias="date"),
    service: WardService = Depends(get_ward_service),
):
    try:
        return service.list_daily_reports(day or service.today())
    except BackendError as exc:
        logger.warning("Error fetching daily reports: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch daily reports")


@router.get("/specialties", response_model=List[str])
def list_specialties():
    return WardService.specialties()
