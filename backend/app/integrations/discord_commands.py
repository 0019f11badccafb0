"""Discord application-command registration client."""

from __future__ import annotations

import httpx

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class DiscordAPIError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DiscordCommandRegistrar:
    """Removes slash commands previously registered for a bot application."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.discord_api_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.discord_request_timeout_seconds
        self._transport = transport

    async def deregister_command(
        self,
        application_id: str,
        command_id: str,
        bot_token: str,
    ) -> None:
        """Delete a global application command; an unknown command is treated as deleted."""
        url = f"{self._base_url}/applications/{application_id}/commands/{command_id}"
        headers = {"Authorization": f"Bot {bot_token}"}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.delete(url, headers=headers)
        except httpx.HTTPError as exc:
            raise DiscordAPIError(f"Discord request failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug(
                "discord.command.already_absent application_id=%s command_id=%s",
                application_id,
                command_id,
            )
            return
        if response.is_error:
            raise DiscordAPIError(
                f"Discord API error {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        logger.info(
            "discord.command.deleted application_id=%s command_id=%s",
            application_id,
            command_id,
        )
