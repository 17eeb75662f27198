from unittest.mock import Mock

import pytest

from snowcraft.client import Client


@pytest.fixture
def client():
    """A Client whose exec/query are mocks, so collections can be checked for the SQL they send."""
    mock_client = Mock(spec=Client)
    mock_client.exec.return_value = 0
    mock_client.query.return_value = []
    return mock_client
