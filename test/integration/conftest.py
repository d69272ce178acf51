from collections.abc import AsyncGenerator, Generator
from os import environ

import aioboto3
from moto.server import ThreadedMotoServer
from pytest import fixture
from pytest_asyncio import fixture as async_fixture
from types_aiobotocore_dynamodb.service_resource import DynamoDBServiceResource, Table

from dynamodesk.browser import TableBrowser
from dynamodesk.cancellation import CancellationRegistry
from dynamodesk.client import DynamoStoreClient


@fixture(scope="session", autouse=True)
def aws_credentials() -> None:
    environ["AWS_ACCESS_KEY_ID"] = "testing"
    environ["AWS_SECRET_ACCESS_KEY"] = "testing"  # noqa: S105
    environ["AWS_SECURITY_TOKEN"] = "testing"  # noqa: S105
    environ["AWS_SESSION_TOKEN"] = "testing"  # noqa: S105
    environ["AWS_DEFAULT_REGION"] = "us-east-1"


@fixture(scope="session")
def dynamodb_endpoint(aws_credentials: None) -> Generator[str, None, None]:
    """Session-scoped moto server providing the endpoint URL."""
    server = ThreadedMotoServer(ip_address="127.0.0.1", port=0)
    server.start()
    host, port = server.get_host_and_port()
    yield f"http://{host}:{port}"
    server.stop()


@async_fixture
async def dynamodb(
    dynamodb_endpoint: str,
) -> AsyncGenerator[DynamoDBServiceResource, None]:
    """Function-scoped aioboto3 resource reusing the session-scoped endpoint."""
    session = aioboto3.Session()
    async with session.resource("dynamodb", endpoint_url=dynamodb_endpoint) as dynamodb:
        yield dynamodb


@async_fixture
async def orders_table(dynamodb: DynamoDBServiceResource) -> AsyncGenerator[Table, None]:
    """Orders keyed by user_id and order_id, with a GSI on status."""
    table = await dynamodb.create_table(
        TableName="Orders",
        KeySchema=[
            {"AttributeName": "user_id", "KeyType": "HASH"},
            {"AttributeName": "order_id", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "user_id", "AttributeType": "S"},
            {"AttributeName": "order_id", "AttributeType": "S"},
            {"AttributeName": "status", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "status-index",
                "KeySchema": [
                    {"AttributeName": "status", "KeyType": "HASH"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    await table.wait_until_exists()

    yield table

    await table.delete()


@async_fixture
async def scores_table(dynamodb: DynamoDBServiceResource) -> AsyncGenerator[Table, None]:
    """Scores keyed by player with a numeric sort key."""
    table = await dynamodb.create_table(
        TableName="Scores",
        KeySchema=[
            {"AttributeName": "player", "KeyType": "HASH"},
            {"AttributeName": "score", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "player", "AttributeType": "S"},
            {"AttributeName": "score", "AttributeType": "N"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    await table.wait_until_exists()

    yield table

    await table.delete()


@fixture
def store(dynamodb: DynamoDBServiceResource) -> DynamoStoreClient:
    return DynamoStoreClient(dynamodb)


@fixture
def browser(store: DynamoStoreClient) -> TableBrowser:
    return TableBrowser(store, registry=CancellationRegistry())
