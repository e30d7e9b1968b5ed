"""API endpoints for launching an IDE and polling host notifications."""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..context import AppContext
from ..models.launch import InvocationContext, LaunchOutcome
from ..services.host_bridge import NotificationHostBridge
from .dependencies import get_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Jump"])


@router.post("/jump", response_model=LaunchOutcome, response_model_by_alias=True)
async def jump(request: InvocationContext, context: AppContext = Depends(get_context)):
    """Open the selected (or requested) IDE at the given file position.

    Launch failures are reported in the outcome body, never as HTTP errors.
    """
    outcome = await context.jump_service.jump(request)
    logger.debug(f"Jump outcome: {outcome.status}")
    return outcome


@router.get("/notifications", response_model=List[Dict[str, Any]])
async def pop_notifications(context: AppContext = Depends(get_context)):
    """Drain queued messages for the host to display."""
    if isinstance(context.host, NotificationHostBridge):
        return [notification.to_dict() for notification in context.host.pop_all()]
    return []
