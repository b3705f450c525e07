"""Availability router - recurring slot generation"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthUser, require_admin
from ...database import get_db
from .service import AvailabilityService

router = APIRouter(prefix="/functions/v1", tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


@router.post("/process-recurring-patterns")
async def process_recurring_patterns(
    admin: AuthUser = Depends(require_admin),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Generate slots for the active recurring patterns now (also runs daily in the worker)"""
    return service.process_recurring_patterns()
