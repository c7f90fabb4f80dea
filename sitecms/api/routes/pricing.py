"""Public pricing matrix for one pricing section."""

from fastapi import APIRouter, Query, Response

from sitecms.db.base import get_session_factory
from sitecms.schemas.pricing import PricingMatrix
from sitecms.services.pricing_service import PricingResolver

router = APIRouter()


@router.get("/pricing-sections/{section_id}", response_model=PricingMatrix)
async def get_pricing_matrix(
    section_id: int,
    response: Response,
    billing_cycle_id: str | None = Query(None, alias="billingCycleId"),
):
    """Resolved plans, prices and comparison rows for the selected cycle.

    ``empty`` is a normal answer; ``error`` returns 500 so callers can offer a
    retry.
    """
    factory = get_session_factory()
    async with factory() as session:
        matrix = await PricingResolver().resolve(session, section_id, billing_cycle_id)

    if matrix.state == "error":
        response.status_code = 500
    return matrix
