"""
Relay container.

Owns the long-lived objects of one relay process: database engine, session
registry, identity assigner, services, broadcast coordinator, translation
gateway and the background jobs (expiration sweeper, cache purger). Built
once at startup and kept on ``app.state``; tests build one over in-memory
SQLite with fake providers.

Dependencies: chatrelay.configs, chatrelay.core, chatrelay.application, chatrelay.boundary
System role: Composition root
"""

import logging
import random
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from chatrelay.application.adapters.translation_cache_adapter import DatabaseTranslationCache
from chatrelay.application.services.file_service import FileService
from chatrelay.application.services.message_service import MessageService
from chatrelay.boundary.aws.s3_client import S3FileStore
from chatrelay.boundary.db.base import utcnow
from chatrelay.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from chatrelay.configs import Settings
from chatrelay.core.broadcast import BroadcastCoordinator
from chatrelay.core.identity import IdentityAssigner
from chatrelay.core.scheduler import PeriodicTask
from chatrelay.core.session_registry import SessionRegistry
from chatrelay.core.sweeper import ExpirationSweeper
from chatrelay.core.translation.cache import InMemoryTranslationCache, TranslationCache
from chatrelay.core.translation.gateway import TranslationGateway
from chatrelay.core.translation.providers import (
    ToneClassifier,
    TranslationProvider,
    build_provider_chain,
)

logger = logging.getLogger(__name__)


class RelayContainer:
    """Long-lived relay components wired from settings."""

    def __init__(
        self,
        settings: Settings,
        engine: AsyncEngine,
        session_factory: async_sessionmaker,
        registry: SessionRegistry,
        message_service: MessageService,
        file_service: FileService,
        coordinator: BroadcastCoordinator,
        gateway: TranslationGateway,
        sweeper: ExpirationSweeper,
        cache_purger: PeriodicTask,
    ) -> None:
        self.settings = settings
        self.engine = engine
        self.session_factory = session_factory
        self.registry = registry
        self.message_service = message_service
        self.file_service = file_service
        self.coordinator = coordinator
        self.gateway = gateway
        self.sweeper = sweeper
        self.cache_purger = cache_purger

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        engine: AsyncEngine | None = None,
        blob_store: S3FileStore | None = None,
        providers: Sequence[TranslationProvider] | None = None,
        tone_classifier: ToneClassifier | None = None,
        translation_cache: TranslationCache | None = None,
        clock: Callable[[], datetime] = utcnow,
        rng: random.Random | None = None,
    ) -> "RelayContainer":
        """
        Wire the relay from settings.

        Every collaborator with an external dependency can be passed in;
        anything omitted is built from configuration.
        """
        engine = engine or get_async_engine(settings.database)
        session_factory = get_async_session_factory(engine)

        registry = SessionRegistry()
        assigner = IdentityAssigner(registry, max_attempts=settings.relay.name_max_attempts, rng=rng)
        message_service = MessageService(session_factory)
        blob_store = blob_store or S3FileStore(
            bucket=settings.storage.bucket,
            region=settings.storage.region,
            public_base_url=settings.storage.public_base_url,
        )
        file_service = FileService(session_factory, blob_store, settings.storage, message_service)
        coordinator = BroadcastCoordinator(
            registry,
            assigner,
            message_service,
            settings.relay,
            file_service=file_service,
            clock=clock,
        )

        if providers is None:
            providers, tone_classifier = build_provider_chain(settings.translation)
        if translation_cache is None:
            if settings.translation.cache_backend == "memory":
                translation_cache = InMemoryTranslationCache(settings.translation.cache_ttl, clock)
            else:
                translation_cache = DatabaseTranslationCache(
                    session_factory, settings.translation.cache_ttl, clock
                )
        gateway = TranslationGateway(
            providers,
            translation_cache,
            tone_classifier=tone_classifier,
            timeout_seconds=settings.translation.provider_timeout_seconds,
        )

        sweeper = ExpirationSweeper(
            message_service.delete_expired,
            coordinator.announce_expired,
            clock=clock,
            interval=timedelta(seconds=settings.relay.sweep_interval_seconds),
            initial_delay=timedelta(seconds=settings.relay.sweep_initial_delay_seconds),
            batch_size=settings.relay.sweep_batch_size,
        )
        cache_purger = PeriodicTask(
            "translation-cache-purge",
            gateway.purge_cache,
            interval=settings.translation.cache_purge_interval,
            initial_delay=settings.translation.cache_purge_interval,
        )

        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            registry=registry,
            message_service=message_service,
            file_service=file_service,
            coordinator=coordinator,
            gateway=gateway,
            sweeper=sweeper,
            cache_purger=cache_purger,
        )

    async def startup(self) -> None:
        """Create tables and start background jobs."""
        await create_tables(self.engine)
        if self.settings.relay.sweep_enabled:
            self.sweeper.start()
        if self.settings.translation.cache_purge_enabled:
            self.cache_purger.start()
        logger.info(
            "Relay started",
            extra={
                "providers": self.gateway.provider_names,
                "sweep_enabled": self.settings.relay.sweep_enabled,
                "history_window": self.settings.relay.history_window,
            },
        )

    async def shutdown(self) -> None:
        """Stop background jobs and release the engine."""
        await self.sweeper.stop()
        await self.cache_purger.stop()
        await self.engine.dispose()
        logger.info("Relay stopped")
