"""HTTP routes for the shipment ledger."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from iam.dependencies.user import get_tenant_context
from shared_kernel.authorization import PermissionDeniedError
from shared_kernel.middleware.tenant_context import TenantContext
from shipping.application.services import ShipmentService
from shipping.dependencies import get_shipment_service
from shipping.domain.value_objects import ShipmentId
from shipping.ports.exceptions import (
    DuplicateTrackingNumberError,
    OrganizationNotFoundError,
    ShipmentNotFoundError,
)
from shipping.presentation.models import ShipmentResponse, TravelEventResponse
from shipping.presentation.shipments.models import (
    AddTravelEventRequest,
    CreateShipmentRequest,
    ShipmentListResponse,
    UpdateShipmentRequest,
)

router = APIRouter(
    prefix="/shipments",
    tags=["shipments"],
)


def _parse_shipment_id(shipment_id: str) -> ShipmentId:
    try:
        return ShipmentId.from_string(shipment_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shipment not found",
        ) from e


@router.get("")
async def list_shipments(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[ShipmentService, Depends(get_shipment_service)],
) -> ShipmentListResponse:
    """List the caller's shipments, most recently created first."""
    try:
        shipments = await service.list_for_organization(context)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e

    return ShipmentListResponse(
        shipments=[ShipmentResponse.from_domain(s) for s in shipments]
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def create_shipment(
    request: CreateShipmentRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[ShipmentService, Depends(get_shipment_service)],
) -> ShipmentResponse:
    """Create a shipment.

    The stored tracking number is the organization's initials followed by
    the submitted suffix, e.g. ``ACME-12345``.

    Raises:
        HTTPException: 400 if the tracking number is taken or a field is invalid
        HTTPException: 403 if the caller may not manage shipments
        HTTPException: 404 if the caller's organization no longer exists
    """
    try:
        shipment = await service.create_shipment(context, request.to_command())
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except (DuplicateTrackingNumberError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except OrganizationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return ShipmentResponse.from_domain(shipment)


@router.get("/{shipment_id}")
async def get_shipment(
    shipment_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[ShipmentService, Depends(get_shipment_service)],
) -> ShipmentResponse:
    """Get one of the caller's shipments with its travel history.

    Raises:
        HTTPException: 404 if absent or owned by another organization
    """
    try:
        shipment = await service.get_shipment(context, _parse_shipment_id(shipment_id))
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ShipmentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return ShipmentResponse.from_domain(shipment)


@router.put("/{shipment_id}")
async def update_shipment(
    shipment_id: str,
    request: UpdateShipmentRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[ShipmentService, Depends(get_shipment_service)],
) -> ShipmentResponse:
    """Edit a shipment's descriptive fields.

    Tracking number and status cannot be changed here.
    """
    try:
        shipment = await service.update_shipment(
            context, _parse_shipment_id(shipment_id), request.to_changes()
        )
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ShipmentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return ShipmentResponse.from_domain(shipment)


@router.post(
    "/{shipment_id}/events",
    status_code=status.HTTP_201_CREATED,
)
async def add_travel_event(
    shipment_id: str,
    request: AddTravelEventRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[ShipmentService, Depends(get_shipment_service)],
) -> TravelEventResponse:
    """Append a travel event. Its status becomes the shipment's status."""
    try:
        event = await service.add_travel_event(
            context, _parse_shipment_id(shipment_id), request.to_command()
        )
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ShipmentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return TravelEventResponse.from_domain(event)
