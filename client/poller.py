import asyncio
from typing import Any, Awaitable, Callable, List, Optional

import httpx
from loguru import logger

from client.progress import ImportProgress, render_progress
from client.session import SessionContext

MIN_POLL_INTERVAL = 2.0


class ImportStatusPoller:
    """Polls the project list and keeps the last good progress rendering.

    A failed fetch leaves ``progress`` untouched; a 401 also drops the session.
    """

    def __init__(
        self,
        session: SessionContext,
        base_url: str,
        api_prefix: str = "/api",
        client: Optional[httpx.AsyncClient] = None,
        on_update: Optional[Callable[[ImportProgress], Any]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.session = session
        self.projects_path = f"{api_prefix}/projects"
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=10.0)
        self._owns_client = client is None
        self._on_update = on_update
        self._sleep = sleep or asyncio.sleep
        self.progress = ImportProgress()
        self.projects: List[dict] = []

    async def refresh(self) -> bool:
        if not self.session.is_authenticated:
            return False
        try:
            response = await self._client.get(self.projects_path, headers=self.session.auth_headers())
            response.raise_for_status()
            projects = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Project poll failed: {e.response.status_code}")
            if e.response.status_code == 401:
                self.session.invalidate()
            return False
        except (httpx.RequestError, ValueError) as e:
            logger.warning(f"Project poll failed: {e}")
            return False

        self.projects = projects
        self.progress = render_progress(projects)
        if self._on_update is not None:
            self._on_update(self.progress)
        return True

    async def run(self, interval: float = 5.0, iterations: Optional[int] = None) -> ImportProgress:
        interval = max(interval, MIN_POLL_INTERVAL)
        count = 0
        while iterations is None or count < iterations:
            await self.refresh()
            count += 1
            if not self.session.is_authenticated:
                logger.warning("Not signed in, stopping poll")
                break
            if iterations is not None and count >= iterations:
                break
            await self._sleep(interval)
        return self.progress

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ImportStatusPoller":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
