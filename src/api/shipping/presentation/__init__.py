"""Shipping presentation layer.

Routes are grouped by resource: shipments, travel events, attachments and
public tracking.
"""

from __future__ import annotations

from fastapi import APIRouter

from shipping.presentation.events.routes import router as events_router
from shipping.presentation.files.routes import router as files_router
from shipping.presentation.shipments.routes import router as shipments_router
from shipping.presentation.tracking.routes import router as tracking_router

router = APIRouter()

router.include_router(shipments_router)
router.include_router(events_router)
router.include_router(files_router)
router.include_router(tracking_router)

__all__ = ["router"]
