"""DynamoDB repository for the single-table migration."""

from collections.abc import AsyncIterator
from typing import Any

import aioboto3  # type: ignore[import-untyped]
from botocore.exceptions import ClientError

from . import schema
from .naming import normalize_table_name


class Repository:
    """
    Async DynamoDB repository for the versa single table.

    Provides the scan and transaction primitives used by the migrator, plus
    table lifecycle helpers for tests and local tooling.
    """

    def __init__(
        self,
        table_name: str,
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        self._table_name = normalize_table_name(table_name)
        self.region = region
        self.endpoint_url = endpoint_url
        self._session: aioboto3.Session | None = None
        self._client: Any = None

    @property
    def table_name(self) -> str:
        return self._table_name

    async def _get_client(self) -> Any:
        """Get or create the DynamoDB client."""
        if self._client is None:
            self._session = aioboto3.Session()
            self._client = await self._session.client(
                "dynamodb",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
            ).__aenter__()
        return self._client

    async def close(self) -> None:
        """Close the DynamoDB client."""
        if self._client is not None:
            await self._client.__aexit__(None, None, None)
            self._client = None
            self._session = None

    async def __aenter__(self) -> "Repository":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Table operations
    # -------------------------------------------------------------------------

    async def create_table(self) -> None:
        """Create the DynamoDB table if it doesn't exist."""
        client = await self._get_client()
        definition = schema.get_table_definition(self.table_name)

        try:
            await client.create_table(**definition)
            # Wait for table to be active
            waiter = client.get_waiter("table_exists")
            await waiter.wait(TableName=self.table_name)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceInUseException":
                raise

    async def delete_table(self) -> None:
        """Delete the DynamoDB table."""
        client = await self._get_client()
        try:
            await client.delete_table(TableName=self.table_name)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceNotFoundException":
                raise

    # -------------------------------------------------------------------------
    # Item operations
    # -------------------------------------------------------------------------

    async def put_item(self, item: dict[str, Any]) -> None:
        """Write a raw item (used to seed legacy records)."""
        client = await self._get_client()
        await client.put_item(TableName=self.table_name, Item=item)

    async def get_item(self, pk: str, sk: str) -> dict[str, Any] | None:
        """Fetch a raw item by its primary key."""
        client = await self._get_client()
        response = await client.get_item(
            TableName=self.table_name,
            Key={schema.PK: {"S": pk}, schema.SK: {"S": sk}},
            ConsistentRead=True,
        )
        item: dict[str, Any] | None = response.get("Item")
        return item

    async def scan_pages(self, page_size: int | None = None) -> AsyncIterator[list[dict[str, Any]]]:
        """
        Scan the whole table, yielding one page of raw items at a time.

        Follows ``LastEvaluatedKey`` until DynamoDB stops returning one.
        Read errors are not caught: a failed page aborts the scan.
        """
        client = await self._get_client()
        scan_params: dict[str, Any] = {"TableName": self.table_name}
        if page_size is not None:
            scan_params["Limit"] = page_size

        while True:
            response = await client.scan(**scan_params)
            yield response.get("Items", [])

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                break
            scan_params["ExclusiveStartKey"] = last_evaluated_key

    async def replace_item(self, new_item: dict[str, Any], old_key: dict[str, Any]) -> None:
        """
        Put ``new_item`` and delete ``old_key`` in a single transaction.

        The put must not overwrite an existing item and the old item must
        still exist, otherwise the whole transaction is cancelled.

        Raises:
            ClientError: If the transaction is cancelled or rejected
        """
        await self.transact_write(
            [
                {
                    "Put": {
                        "TableName": self.table_name,
                        "Item": new_item,
                        "ConditionExpression": "attribute_not_exists(#pk)",
                        "ExpressionAttributeNames": {"#pk": schema.PK},
                    }
                },
                {
                    "Delete": {
                        "TableName": self.table_name,
                        "Key": old_key,
                        "ConditionExpression": "attribute_exists(#pk)",
                        "ExpressionAttributeNames": {"#pk": schema.PK},
                    }
                },
            ]
        )

    async def transact_write(self, items: list[dict[str, Any]]) -> None:
        """Execute a transactional write."""
        if not items:
            return

        client = await self._get_client()
        await client.transact_write_items(TransactItems=items)
