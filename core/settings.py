"""
Payment-related settings using pydantic-settings v2 with nested env keys.

This module is isolated so core.config.Settings stays focused on the app.
Values are read once here and handed to gateway clients explicitly; nothing
is pushed into SDK-global configuration.
"""
from __future__ import annotations

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field


class MollieSettings(BaseModel):
    # Driver key under which the adapter is registered
    driver: str = "mollie"
    api_key: Optional[str] = None
    api_endpoint: Optional[str] = None
    # Customer is sent back here after the hosted checkout
    redirect_url: str = "http://localhost:3000/checkout/complete"
    # Public URL Mollie posts status changes to; omitted when unset (local dev)
    webhook_url: Optional[str] = None
    timeout_connect: float = 2.0
    timeout_read: float = 10.0


class PaymentSettings(BaseSettings):
    mollie: MollieSettings = Field(default_factory=MollieSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )


payment_settings = PaymentSettings()
