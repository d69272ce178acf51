"""Runtime settings for the execution core.

Uses pydantic-settings, so every field can be overridden with a
``DYNAMODESK_``-prefixed environment variable.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DynamoDeskSettings(BaseSettings):
    """Tunables for paginated reads, batch writes and store sessions.

    Example:
        DYNAMODESK_PROGRESS_THROTTLE_MS=250 overrides progress_throttle_ms.

    """

    model_config = SettingsConfigDict(
        env_prefix="DYNAMODESK_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    progress_throttle_ms: int = Field(
        default=150,
        description="Minimum time between two progress events of one read",
        ge=0,
    )
    write_batch_size: int = Field(
        default=25,
        description="Operations per BatchWriteItem call (store limit is 25)",
        ge=1,
        le=25,
    )
    max_write_attempts: int = Field(
        default=5,
        description="Total attempts for a batch, first try included",
        ge=1,
    )
    backoff_base_ms: int = Field(
        default=100,
        description="Delay before the first retry; doubles for each later one",
        ge=0,
    )
    default_region: str = Field(
        default="us-east-1",
        description="Region used when a profile does not configure one",
    )

    # Endpoint override (e.g. DynamoDB Local)
    endpoint_url: str | None = Field(
        default=None,
        description="Override DynamoDB endpoint URL",
    )


__all__ = [
    "DynamoDeskSettings",
]
