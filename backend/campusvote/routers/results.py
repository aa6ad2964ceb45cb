from fastapi import APIRouter, Depends

from campusvote.dependencies import get_election_service
from campusvote.models import ResultsSummary
from campusvote.service import ElectionService

router = APIRouter(prefix="/results", tags=["results"])


@router.get("", response_model=ResultsSummary)
def get_results(service: ElectionService = Depends(get_election_service)):
    return service.get_results(final_only=True)
