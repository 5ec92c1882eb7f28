"""Lightweight REST client for the league API."""

from __future__ import annotations

from typing import Any, Optional

import httpx


class LeagueClient:
    """Thin wrapper over ``httpx.AsyncClient``; raises ``httpx.HTTPStatusError`` on 4xx/5xx."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "LeagueClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = await self._client.request(method, path, **kwargs)
        resp.raise_for_status()
        return resp.json() if resp.content else None

    async def list_players(self) -> list[dict]:
        return await self._request("GET", "/players")

    async def add_player(self, player_id: str, name: str, **fields: Any) -> dict:
        return await self._request("POST", "/players", json={"id": player_id, "name": name, **fields})

    async def week_schedule(self, week_id: str) -> list[dict]:
        return await self._request("GET", f"/schedule/{week_id}")

    async def schedule_player(self, week_id: str, player_id: str, **fields: Any) -> dict:
        return await self._request("POST", "/schedule", json={"weekId": week_id, "playerId": player_id, **fields})

    async def pending_swaps(self) -> list[dict]:
        return await self._request("GET", "/swaps")

    async def get_swap(self, swap_id: str) -> dict:
        return await self._request("GET", f"/swaps/{swap_id}")

    async def request_swap(self, week_id: str, requesting_player_id: str, target_player_id: str) -> dict:
        return await self._request(
            "POST",
            "/swaps",
            json={
                "weekId": week_id,
                "requestingPlayerId": requesting_player_id,
                "targetPlayerId": target_player_id,
            },
        )

    async def approve_swap(self, swap_id: str) -> dict:
        return await self._request("PUT", f"/swaps/{swap_id}/approve")

    async def reject_swap(self, swap_id: str) -> dict:
        return await self._request("PUT", f"/swaps/{swap_id}/reject")
