from app.schemas.bot_integrations import (
    DiscordCommandRef,
    DiscordIntegrationConfig,
    parse_discord_config,
)

__all__ = [
    "DiscordCommandRef",
    "DiscordIntegrationConfig",
    "parse_discord_config",
]
