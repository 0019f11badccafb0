"""Typed views over the platform-specific `BotIntegration.config` payload."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class DiscordCommandRef(BaseModel):
    # Discord snowflakes are sometimes stored as JSON numbers.
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    command_id: str = Field(alias="commandId", min_length=1)
    command_name: str | None = Field(default=None, alias="commandName")


class DiscordIntegrationConfig(BaseModel):
    """Discord bot settings; unknown keys are kept but ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    bot_token: str | None = Field(default=None, alias="botToken")
    public_key: str | None = Field(default=None, alias="publicKey")
    application_id: str | None = Field(default=None, alias="applicationId")
    discord_command: DiscordCommandRef | None = Field(default=None, alias="discordCommand")

    @property
    def registered_command(self) -> DiscordCommandRef | None:
        """The remote command binding, when enough is known to remove it."""
        if self.discord_command and self.application_id and self.bot_token:
            return self.discord_command
        return None


def parse_discord_config(config: Any) -> DiscordIntegrationConfig | None:
    """Parse a stored config; return None for payloads that are not Discord-shaped."""
    if not isinstance(config, dict):
        return None
    try:
        return DiscordIntegrationConfig.model_validate(config)
    except ValidationError:
        return None
