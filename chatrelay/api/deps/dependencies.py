"""
FastAPI dependency providers.

Routes read the process-wide RelayContainer from ``app.state``.

Dependencies: fastapi, chatrelay.api.deps.container
System role: DI for routers
"""

from fastapi import Request

from chatrelay.api.deps.container import RelayContainer
from chatrelay.application.services.file_service import FileService
from chatrelay.application.services.message_service import MessageService
from chatrelay.core.broadcast import BroadcastCoordinator
from chatrelay.core.translation.gateway import TranslationGateway


def get_container(request: Request) -> RelayContainer:
    return request.app.state.container


def get_coordinator(request: Request) -> BroadcastCoordinator:
    return get_container(request).coordinator


def get_message_service(request: Request) -> MessageService:
    return get_container(request).message_service


def get_file_service(request: Request) -> FileService:
    return get_container(request).file_service


def get_translation_gateway(request: Request) -> TranslationGateway:
    return get_container(request).gateway
