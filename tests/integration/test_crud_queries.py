"""
Test suite for the CRUD layer.

BaseCRUD is checked against a mocked session the way generic helpers are
exercised; the message queries run against in-memory SQLite.

System role: Verification of database access helpers
"""

import uuid
from datetime import timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.boundary.db.CRUD.base_crud import BaseCRUD
from chatrelay.boundary.db.CRUD.file_crud import file_crud
from chatrelay.boundary.db.CRUD.message_crud import message_crud
from chatrelay.boundary.db.models.file_model import FileModel
from conftest import T0


@pytest.fixture
def base_crud() -> BaseCRUD:
    return BaseCRUD(FileModel)


@pytest.fixture
def mock_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


async def add_message(db: AsyncSession, offset: int, ttl: timedelta = timedelta(hours=1), files=None):
    created = T0 + timedelta(seconds=offset)
    return await message_crud.create(
        db,
        user_id="u1",
        user_name="Amber Sky",
        body=f"m{offset}",
        files=files or [],
        is_file_share=bool(files),
        created_at=created,
        expires_at=created + ttl,
    )


class TestBaseCRUDWithMockSession:
    """Test suite for BaseCRUD against a mocked session."""

    @pytest.mark.asyncio
    async def test_create_should_flush_before_refresh(self, base_crud, mock_session) -> None:
        # Arrange
        call_order = []

        async def flush_effect() -> None:
            call_order.append("flush")

        async def refresh_effect(obj: Any) -> None:
            call_order.append("refresh")

        mock_session.flush = AsyncMock(side_effect=flush_effect)
        mock_session.refresh = AsyncMock(side_effect=refresh_effect)

        # Act
        await base_crud.create(mock_session, user_id="u1", name="a.png", mimetype="image/png", url="u", storage_key="k")

        # Assert
        mock_session.add.assert_called_once()
        assert call_order == ["flush", "refresh"]

    @pytest.mark.asyncio
    async def test_delete_by_id_should_report_missing_row(self, base_crud, mock_session) -> None:
        mock_result = MagicMock()
        mock_result.rowcount = 0
        mock_session.execute = AsyncMock(return_value=mock_result)

        assert await base_crud.delete_by_id(mock_session, uuid.uuid4()) is False


class TestFileCRUD:
    """Test suite for file rows on a real database."""

    @pytest.mark.asyncio
    async def test_create_then_get_by_id_should_round_trip(self, test_async_db) -> None:
        created = await file_crud.create(
            test_async_db,
            user_id="u1",
            name="a.png",
            mimetype="image/png",
            size=3,
            url="https://cdn/a.png",
            storage_key="chat_files/1_a.png",
        )

        found = await file_crud.get_by_id(test_async_db, created.id)

        assert found is not None
        assert found.storage_key == "chat_files/1_a.png"
        assert await file_crud.exists(test_async_db, created.id) is True
        assert await file_crud.delete_by_id(test_async_db, created.id) is True
        assert await file_crud.exists(test_async_db, created.id) is False


class TestMessageCRUD:
    """Test suite for message queries."""

    @pytest.mark.asyncio
    async def test_get_recent_should_return_newest_first(self, test_async_db) -> None:
        for offset in range(4):
            await add_message(test_async_db, offset)

        rows = await message_crud.get_recent(test_async_db, 2)

        assert [row.body for row in rows] == ["m3", "m2"]

    @pytest.mark.asyncio
    async def test_get_expired_should_order_by_expiry_and_limit(self, test_async_db) -> None:
        # Arrange
        await add_message(test_async_db, 0, ttl=timedelta(seconds=30))
        await add_message(test_async_db, 1, ttl=timedelta(seconds=5))
        await add_message(test_async_db, 2, ttl=timedelta(hours=1))

        # Act
        rows = await message_crud.get_expired(test_async_db, T0 + timedelta(minutes=1), limit=10)

        # Assert
        assert [row.body for row in rows] == ["m1", "m0"]

    @pytest.mark.asyncio
    async def test_delete_by_ids_should_remove_only_listed_rows(self, test_async_db) -> None:
        first = await add_message(test_async_db, 0)
        second = await add_message(test_async_db, 1)

        removed = await message_crud.delete_by_ids(test_async_db, [first.id])

        assert removed == 1
        assert await message_crud.count(test_async_db) == 1
        assert await message_crud.exists(test_async_db, second.id)
        assert await message_crud.delete_by_ids(test_async_db, []) == 0

    @pytest.mark.asyncio
    async def test_get_file_shares_should_skip_text_messages(self, test_async_db) -> None:
        await add_message(test_async_db, 0)
        share = await add_message(test_async_db, 1, files=[{"fileId": "f1", "name": "a.png", "url": "u"}])

        rows = await message_crud.get_file_shares(test_async_db)

        assert [row.id for row in rows] == [share.id]

    @pytest.mark.asyncio
    async def test_get_all_should_apply_limit_and_offset(self, test_async_db) -> None:
        for offset in range(3):
            await add_message(test_async_db, offset)

        page = await message_crud.get_all(test_async_db, limit=2, offset=1)
        everything = await message_crud.get_all(test_async_db)

        assert len(page) == 2
        assert len(everything) == 3
