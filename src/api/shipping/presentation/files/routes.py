"""HTTP routes for individual event attachments."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from iam.dependencies.user import get_tenant_context
from shared_kernel.authorization import PermissionDeniedError
from shared_kernel.middleware.tenant_context import TenantContext
from shipping.application.services import EventFileService
from shipping.dependencies import get_event_file_service
from shipping.domain.value_objects import EventFileId
from shipping.ports.exceptions import (
    EventFileNotFoundError,
    StorageOperationError,
    StorageUnavailableError,
)
from shipping.presentation.files.models import DownloadResponse

router = APIRouter(
    prefix="/files",
    tags=["files"],
)


def _parse_file_id(file_id: str) -> EventFileId:
    try:
        return EventFileId.from_string(file_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found",
        ) from e


@router.get("/{file_id}/download")
async def get_download_url(
    file_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[EventFileService, Depends(get_event_file_service)],
) -> DownloadResponse:
    """Issue a time-limited download URL for an attachment.

    Raises:
        HTTPException: 404 if absent or owned by another organization
        HTTPException: 503 if file storage is unavailable
    """
    try:
        download = await service.download_url(context, _parse_file_id(file_id))
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except EventFileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (StorageUnavailableError, StorageOperationError) as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    return DownloadResponse.from_signed(download)


@router.delete(
    "/{file_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_file(
    file_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[EventFileService, Depends(get_event_file_service)],
) -> Response:
    """Delete an attachment."""
    try:
        await service.delete(context, _parse_file_id(file_id))
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except EventFileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StorageUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)
