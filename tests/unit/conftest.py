"""
Unit Test Fixtures.

Nothing here touches a database, the filesystem or the network. Services
get a mocked AsyncSession; their repositories are replaced per test.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    AsyncSession stand-in.

    add() is synchronous on the real session, everything else is awaited.
    """
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Logger stand-in for asserting on structured log calls.

    Usage:
        with patch("jotter.backend.services.share_token.logger", mock_logger):
            ...
        assert mock_logger.warning.call_args.kwargs["extra"]["share_token_event"] == "collision"
    """
    return MagicMock()
