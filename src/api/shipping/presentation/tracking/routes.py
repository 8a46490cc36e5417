"""Public shipment tracking route. No authentication required."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from shipping.application.services import ShipmentService
from shipping.dependencies import get_public_shipment_service
from shipping.presentation.models import ShipmentResponse

MIN_TRACKING_NUMBER_LENGTH = 3

router = APIRouter(
    prefix="/track",
    tags=["tracking"],
)


@router.get("/{tracking_number}")
async def track_shipment(
    tracking_number: str,
    service: Annotated[ShipmentService, Depends(get_public_shipment_service)],
) -> ShipmentResponse:
    """Look up a shipment by its full tracking number.

    Raises:
        HTTPException: 400 if the tracking number is too short
        HTTPException: 404 if no shipment has this tracking number
    """
    tracking_number = tracking_number.strip()
    if len(tracking_number) < MIN_TRACKING_NUMBER_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid tracking number",
        )

    shipment = await service.get_by_tracking_number(tracking_number)
    if shipment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shipment not found",
        )

    return ShipmentResponse.from_domain(shipment)
