"""Unit test fixtures."""

import pytest

from tests.fixtures.moto import aws_credentials, mock_dynamodb  # noqa: F401
from versa_tenancy import Repository


@pytest.fixture
async def repository(mock_dynamodb):  # noqa: F811
    """Create a Repository backed by a moto table."""
    repo = Repository("versa-test", region="us-east-1")
    await repo.create_table()
    async with repo:
        yield repo
        await repo.delete_table()
