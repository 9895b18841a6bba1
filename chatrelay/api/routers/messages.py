"""
Message API endpoints.

Routes:
- DELETE /api/message/{message_id}?userId= - Owner-only deletion
- GET /api/message-history?page=&limit= - Paginated history, newest page first

Dependencies: chatrelay.application.services, chatrelay.core.broadcast
System role: Message HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query

from chatrelay.api.deps import get_coordinator, get_message_service
from chatrelay.api.routers.router_utils import handle_relay_errors
from chatrelay.application.services.message_service import MessageService
from chatrelay.core.broadcast import BroadcastCoordinator
from chatrelay.models.file import MessageDeletedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["messages"])


@router.delete("/message/{message_id}")
@handle_relay_errors
async def delete_message(
    message_id: str,
    user_id: str = Query("", alias="userId"),
    coordinator: BroadcastCoordinator = Depends(get_coordinator),
):
    """
    Delete a message owned by ``userId`` and broadcast ``message_deleted``.

    Files attached to the message stay reachable.

    Raises:
        403: Requester is not the author
        404: No such message
    """
    await coordinator.delete_message(user_id, message_id)
    return MessageDeletedResponse(message_id=message_id).to_wire()


@router.get("/message-history")
@handle_relay_errors
async def message_history(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    message_service: MessageService = Depends(get_message_service),
):
    """
    Page through stored messages.

    Page 1 holds the newest messages; each page is chronological.
    """
    history = await message_service.get_page(page, limit)
    return history.to_wire()
