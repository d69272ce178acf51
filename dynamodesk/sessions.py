"""Per-profile cache of store clients.

Each AWS profile gets one aioboto3 session and one open DynamoDB resource,
created on first use and kept until the profile is cleared (for example after
the user re-authenticates) or the factory is closed. Credentials are resolved
by botocore from the profile, including cached SSO tokens.

list_profiles reads the profiles a client can be opened for from the AWS
config file.
"""

import logging
from contextlib import AsyncExitStack
from types import TracebackType
from typing import Any

import aioboto3
import botocore.session
from botocore.exceptions import ProfileNotFound
from pydantic import BaseModel
from typing_extensions import Self

from dynamodesk.client import DynamoStoreClient
from dynamodesk.config import DynamoDeskSettings
from dynamodesk.exceptions import ProfileNotFoundError
from dynamodesk.models import AwsProfile, SsoSession

logger = logging.getLogger(__name__)


class StoreClientFactory:
    """Creates and caches one DynamoStoreClient per AWS profile.

    Use as an async context manager so every open resource is closed.

    Example:
        async with StoreClientFactory() as factory:
            store = await factory.get_client("dev")
            browser = TableBrowser(store)
            tables = await browser.list_tables()

    """

    def __init__(self, settings: DynamoDeskSettings | None = None) -> None:
        self._settings = settings or DynamoDeskSettings()
        self._clients: dict[str | None, DynamoStoreClient] = {}
        self._stacks: dict[str | None, AsyncExitStack] = {}

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def get_client(self, profile_name: str | None = None) -> DynamoStoreClient:
        """Return the cached client for profile_name, creating it on first use.

        Args:
            profile_name: AWS profile to use; None uses the default chain.

        Raises:
            ProfileNotFoundError: If the profile is not configured.

        """
        client = self._clients.get(profile_name)
        if client is not None:
            return client

        try:
            session = aioboto3.Session(profile_name=profile_name)
        except ProfileNotFound as e:
            raise ProfileNotFoundError(profile_name=profile_name or "default") from e

        region_name = session.region_name or self._settings.default_region
        stack = AsyncExitStack()
        resource = await stack.enter_async_context(
            session.resource(
                "dynamodb",
                region_name=region_name,
                endpoint_url=self._settings.endpoint_url,
            )
        )
        logger.debug("Opened DynamoDB resource for profile %s in %s", profile_name, region_name)

        client = DynamoStoreClient(resource)
        self._clients[profile_name] = client
        self._stacks[profile_name] = stack
        return client

    async def clear_profile(self, profile_name: str | None) -> None:
        """Close and forget the client of one profile."""
        self._clients.pop(profile_name, None)
        stack = self._stacks.pop(profile_name, None)
        if stack is not None:
            await stack.aclose()

    async def aclose(self) -> None:
        """Close every cached client."""
        for profile_name in list(self._stacks):
            await self.clear_profile(profile_name)

    def __contains__(self, profile_name: object) -> bool:
        return profile_name in self._clients


def list_profiles(settings: DynamoDeskSettings | None = None) -> list[AwsProfile]:
    """List the profiles of the AWS config file, sorted by name.

    The file is read by botocore, so ``AWS_CONFIG_FILE`` is honoured. Profiles
    without a region get settings.default_region. A missing file yields an
    empty list.
    """
    settings = settings or DynamoDeskSettings()
    full_config = botocore.session.get_session().full_config

    sso_sessions = {
        name: SsoSession(name=name, **_pick(values, SsoSession))
        for name, values in full_config.get("sso_sessions", {}).items()
    }

    profiles = []
    for name, values in full_config.get("profiles", {}).items():
        fields = _pick(values, AwsProfile)
        if not fields.get("region"):
            fields["region"] = settings.default_region
        session_name = fields.get("sso_session")
        profiles.append(
            AwsProfile(
                name=name,
                sso_session_settings=sso_sessions.get(session_name) if session_name else None,
                **fields,
            )
        )

    logger.debug("Found %d AWS profiles", len(profiles))
    return sorted(profiles, key=lambda profile: profile.name)


def _pick(values: dict[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    return {
        key: value
        for key, value in values.items()
        if key in model.model_fields and key not in ("name", "sso_session_settings")
    }


__all__ = [
    "StoreClientFactory",
    "list_profiles",
]
