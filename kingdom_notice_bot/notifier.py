# kingdom_notice_bot/notifier.py

from __future__ import annotations

import asyncio
import logging

import requests

from .errors import ConfigError, TransportError
from .models import Notice

LOGGER = logging.getLogger(__name__)

DISCORD_API_URL = "https://discord.com/api/v10"
AUTHOR_NAME = "네이버 카페 공지사항"
REQUEST_TIMEOUT = 10
RECONNECT_DELAY = 30.0


def build_embed(notice: Notice) -> dict:
    """공지 정보를 디스코드 임베드 형태로 변환."""
    embed = {
        "title": notice.title,
        "url": notice.url,
        "author": {"name": AUTHOR_NAME},
    }
    if notice.timestamp is not None:
        embed["timestamp"] = notice.timestamp.isoformat()
    return embed


class DiscordNotifier:
    """봇 토큰으로 디스코드 채널에 공지를 보내는 클라이언트."""

    def __init__(
        self,
        token: str,
        guild_id: int,
        channel_id: int,
        *,
        reconnect_delay: float = RECONNECT_DELAY,
    ) -> None:
        self.token = token
        self.guild_id = guild_id
        self.channel_id = channel_id
        self.reconnect_delay = reconnect_delay

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        headers = {"Authorization": f"Bot {self.token}"}
        try:
            resp = requests.request(
                method,
                f"{DISCORD_API_URL}{path}",
                headers=headers,
                timeout=REQUEST_TIMEOUT,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Discord {method} {path} failed: {exc}") from exc

        if resp.status_code == 401:
            raise ConfigError("DISCORD_BOT_TOKEN was rejected by Discord")

        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise TransportError(
                f"Discord {method} {path} failed: {exc}", status_code=resp.status_code
            ) from exc
        return resp

    def check_channel(self) -> None:
        """토큰이 유효하고 채널이 설정한 서버(guild)에 속하는지 확인."""
        user = self._request("GET", "/users/@me").json()
        try:
            channel = self._request("GET", f"/channels/{self.channel_id}").json()
        except TransportError as exc:
            # 없는 채널(404)이나 볼 수 없는 채널(403)은 재시도해도 소용없음
            if exc.status_code in (403, 404):
                raise ConfigError(
                    f"CHANNEL_ID {self.channel_id} is not visible to the bot: {exc}"
                ) from exc
            raise

        if str(channel.get("guild_id")) != str(self.guild_id):
            raise ConfigError(
                f"CHANNEL_ID {self.channel_id} does not belong to GUILD_ID {self.guild_id}"
            )
        LOGGER.info(
            "디스코드 연결 완료: %s -> #%s", user.get("username"), channel.get("name")
        )

    async def connect(self, ready: asyncio.Future) -> None:
        """디스코드를 사용할 수 있을 때까지 재시도한 뒤 ``ready``를 한 번 완료."""
        while True:
            try:
                await asyncio.to_thread(self.check_channel)
            except TransportError as exc:
                LOGGER.warning(
                    "디스코드 연결 실패, %.0f초 후 재시도: %s", self.reconnect_delay, exc
                )
                await asyncio.sleep(self.reconnect_delay)
                continue
            break

        ready.set_result(None)

    def send_message(self, notice: Notice) -> None:
        """단일 공지를 디스코드 채널로 전송."""
        payload = {
            "allowed_mentions": {"parse": []},  # 멘션 방지
            "embeds": [build_embed(notice)],
        }

        self._request("POST", f"/channels/{self.channel_id}/messages", json=payload)
        LOGGER.info("디스코드 전송 완료: %d (%s)", notice.number, notice.title)

    async def send(self, notice: Notice) -> None:
        await asyncio.to_thread(self.send_message, notice)
