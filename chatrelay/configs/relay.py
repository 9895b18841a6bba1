"""
Relay configuration settings.

Message lifetime, history window and expiration sweep scheduling.

Dependencies: pydantic, pydantic_settings
System role: Tuning knobs for the broadcast coordinator and sweeper
"""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from chatrelay.configs.base import BaseSettings


class RelaySettings(BaseSettings):
    """Chat relay behaviour configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RELAY_",
        case_sensitive=False,
        extra="ignore",
    )

    message_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        gt=0,
        description="Time-to-live of chat messages and file shares",
    )
    history_window: int = Field(
        default=50,
        ge=1,
        le=200,
        description="Number of recent messages pushed to a joining client",
    )
    max_message_length: int = Field(
        default=4000,
        gt=0,
        description="Maximum characters accepted in a chat message body",
    )
    name_max_attempts: int = Field(
        default=10,
        ge=1,
        description="Attempts at composing a non-colliding display name",
    )
    outbound_queue_size: int = Field(
        default=1000,
        ge=1,
        description="Frames queued per connection before a slow client is disconnected",
    )

    sweep_enabled: bool = Field(default=True, description="Run the expiration sweeper")
    sweep_interval_seconds: float = Field(
        default=600,
        gt=0,
        description="Seconds between expiration sweeps",
    )
    sweep_initial_delay_seconds: float = Field(
        default=60,
        ge=0,
        description="Delay before the first sweep after startup",
    )
    sweep_batch_size: int = Field(
        default=100,
        gt=0,
        description="Maximum messages deleted per sweep",
    )

    @property
    def message_ttl(self) -> timedelta:
        return timedelta(seconds=self.message_ttl_seconds)
