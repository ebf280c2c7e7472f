"""Repository protocol for migration storage backends.

The migrator only needs two storage primitives: a paginated full-table scan
and an all-or-nothing put+delete. Any backend providing them (the DynamoDB
``Repository``, an in-memory table in tests) can drive a migration.
"""

from collections.abc import AsyncIterator
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RepositoryProtocol(Protocol):
    """
    Protocol for migration storage backends.

    Example:
        class MyBackend:
            table_name = "versa"

            async def scan_pages(self, page_size=None):
                yield [...]

            async def replace_item(self, new_item, old_key):
                ...

        assert isinstance(MyBackend(), RepositoryProtocol)  # True at runtime
    """

    @property
    def table_name(self) -> str:
        """Name of the single table being migrated."""
        ...

    def scan_pages(self, page_size: int | None = None) -> AsyncIterator[list[dict[str, Any]]]:
        """
        Iterate over every item in the table, one page at a time.

        Args:
            page_size: Maximum items per page (backend default if None)

        Yields:
            Raw DynamoDB attribute maps of one page

        Raises:
            Exception: Any page-read failure, unmodified
        """
        ...

    async def replace_item(self, new_item: dict[str, Any], old_key: dict[str, Any]) -> None:
        """
        Atomically write ``new_item`` and delete the item at ``old_key``.

        Either both operations are applied or neither is.
        """
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...
