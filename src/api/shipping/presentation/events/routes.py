"""HTTP routes for editing travel events and managing their attachments."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from iam.dependencies.user import get_tenant_context
from shared_kernel.authorization import PermissionDeniedError
from shared_kernel.middleware.tenant_context import TenantContext
from shipping.application.services import EventFileService, ShipmentService
from shipping.application.value_objects import FileUpload
from shipping.dependencies import get_event_file_service, get_shipment_service
from shipping.domain.value_objects import TravelEventId
from shipping.ports.exceptions import (
    EventNotFoundError,
    FileTooLargeError,
    StorageOperationError,
    StorageUnavailableError,
)
from shipping.presentation.events.models import (
    EventFileListResponse,
    UpdateTravelEventRequest,
)
from shipping.presentation.models import EventFileResponse, TravelEventResponse

DEFAULT_MIME_TYPE = "application/octet-stream"

router = APIRouter(
    prefix="/events",
    tags=["events"],
)


def _parse_event_id(event_id: str) -> TravelEventId:
    try:
        return TravelEventId.from_string(event_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        ) from e


@router.put("/{event_id}")
async def update_travel_event(
    event_id: str,
    request: UpdateTravelEventRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[ShipmentService, Depends(get_shipment_service)],
) -> TravelEventResponse:
    """Edit a travel event.

    Changing the status re-derives the shipment's current status.

    Raises:
        HTTPException: 400 if an edited value is blank
        HTTPException: 404 if absent or owned by another organization
    """
    try:
        event = await service.update_travel_event(
            context, _parse_event_id(event_id), request.to_changes()
        )
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return TravelEventResponse.from_domain(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_travel_event(
    event_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[ShipmentService, Depends(get_shipment_service)],
) -> Response:
    """Delete a travel event and its attachments.

    Raises:
        HTTPException: 404 if absent or owned by another organization
    """
    try:
        await service.delete_travel_event(context, _parse_event_id(event_id))
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{event_id}/files",
    status_code=status.HTTP_201_CREATED,
)
async def upload_event_file(
    event_id: str,
    file: Annotated[UploadFile, File(description="Attachment content")],
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[EventFileService, Depends(get_event_file_service)],
) -> EventFileResponse:
    """Attach a file to a travel event.

    Raises:
        HTTPException: 404 if the event is absent or owned by another organization
        HTTPException: 413 if the file exceeds the size limit
        HTTPException: 503 if file storage is unavailable
    """
    parsed_id = _parse_event_id(event_id)
    content = await file.read()
    upload = FileUpload(
        original_name=file.filename or "file",
        content=content,
        mime_type=file.content_type or DEFAULT_MIME_TYPE,
    )

    try:
        event_file = await service.upload(context, parsed_id, upload)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except FileTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(e),
        ) from e
    except (StorageUnavailableError, StorageOperationError) as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    return EventFileResponse.from_domain(event_file)


@router.get("/{event_id}/files")
async def list_event_files(
    event_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[EventFileService, Depends(get_event_file_service)],
) -> EventFileListResponse:
    """List a travel event's attachments, newest first."""
    parsed_id = _parse_event_id(event_id)
    try:
        files = await service.list_for_event(context, parsed_id)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return EventFileListResponse(
        event_id=parsed_id.value,
        files=[EventFileResponse.from_domain(f) for f in files],
    )
