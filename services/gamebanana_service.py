# services/gamebanana_service.py

"""
Клиент публичного API GameBanana: имя участника по ID и ID по имени.
Одна попытка с таймаутом, ретраев нет.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from core.config import settings
from core.exceptions import UpstreamIdentityLookupFailure


logger = logging.getLogger(__name__)


class GamebananaService:
    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.session = session
        self.base_url = (base_url or settings.GAMEBANANA_API_URL).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(
            total=timeout_seconds if timeout_seconds is not None else settings.GAMEBANANA_TIMEOUT_SECONDS
        )

    async def _fetch_first(self, path: str, params: dict) -> Any:
        """GET и первый элемент JSON-массива ответа"""
        url = f"{self.base_url}{path}"
        owns_session = self.session is None
        session = self.session or aiohttp.ClientSession()
        try:
            async with session.get(url, params=params, timeout=self.timeout) as resp:
                if resp.status != 200:
                    raise UpstreamIdentityLookupFailure(
                        f"GameBanana api not responding as expected (status {resp.status})"
                    )
                # API отдаёт JSON с content-type text/html
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"GameBanana request {path} {params} failed: {e!r}")
            raise UpstreamIdentityLookupFailure(f"GameBanana api request failed: {e!r}") from e
        finally:
            if owns_session:
                await session.close()

        if not isinstance(data, list) or not data:
            raise UpstreamIdentityLookupFailure(f"Unexpected GameBanana response: {data!r}")
        return data[0]

    async def get_username_by_id(self, gamebanana_id: int) -> Optional[str]:
        """Имя участника или None, если такого ID нет"""
        first = await self._fetch_first("/Core/Member/IdentifyById", {"userid": str(gamebanana_id)})

        if first is None or first is False or str(first).lower() == "false":
            logger.info(f"GameBanana member {gamebanana_id} not found")
            return None
        return str(first)

    async def get_id_by_username(self, username: str) -> Optional[int]:
        """ID участника или None, если такого имени нет"""
        first = await self._fetch_first("/Core/Member/Identify", {"username": username})

        if isinstance(first, bool):
            logger.info(f"GameBanana member '{username}' not found")
            return None
        try:
            return int(first)
        except (TypeError, ValueError):
            logger.info(f"GameBanana member '{username}' not found")
            return None
