from unittest.mock import AsyncMock, patch

import pytest
from pymongo.errors import OperationFailure

from campus_social import main


@pytest.mark.asyncio
async def test_startup_survives_secondary_index_failure(db):
    edge = AsyncMock()
    with patch.object(main, "init_db_indexes", AsyncMock(side_effect=OperationFailure("text index clash"))), \
            patch.object(main, "ensure_follow_edge_index", edge):
        await main.on_startup()
    edge.assert_awaited_once()


@pytest.mark.asyncio
async def test_startup_fails_without_follow_edge_index(db):
    with patch.object(main, "init_db_indexes", AsyncMock(side_effect=OperationFailure("duplicate key"))), \
            patch.object(main, "ensure_follow_edge_index", AsyncMock(side_effect=OperationFailure("duplicate key"))):
        with pytest.raises(OperationFailure):
            await main.on_startup()


@pytest.mark.asyncio
async def test_startup_creates_indexes_once_when_healthy(db):
    edge = AsyncMock()
    with patch.object(main, "ensure_follow_edge_index", edge):
        await main.on_startup()
    edge.assert_not_awaited()
