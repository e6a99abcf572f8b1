import json
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from loguru import logger


class SessionContext:
    """Signed-in state handed to the poller explicitly.

    The file at ``cache_path`` is only a cache: it is read once by
    ``restore`` and wiped by ``invalidate`` when the server rejects the token.
    """

    def __init__(self, token: Optional[str] = None, user: Optional[Dict[str, Any]] = None,
                 cache_path: Optional[str | Path] = None):
        self.token = token
        self.user = user
        self.cache_path = Path(cache_path) if cache_path else None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    @classmethod
    def restore(cls, cache_path: str | Path) -> "SessionContext":
        path = Path(cache_path)
        if not path.is_file():
            return cls(cache_path=path)
        try:
            data = json.loads(path.read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session cache {path}: {e}")
            return cls(cache_path=path)
        if not isinstance(data, dict):
            return cls(cache_path=path)
        return cls(token=data.get("token"), user=data.get("user"), cache_path=path)

    def sign_in(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        self.token = token
        self.user = user
        self.save()

    def save(self) -> None:
        if self.cache_path is None or not self.token:
            return
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.cache_path.write_text(json.dumps({"token": self.token, "user": self.user}))

    def invalidate(self) -> None:
        logger.info("Session invalidated")
        self.token = None
        self.user = None
        if self.cache_path is not None and self.cache_path.exists():
            self.cache_path.unlink()


async def sign_in(session: SessionContext, client: httpx.AsyncClient, token: str,
                  api_prefix: str = "/api") -> Dict[str, Any]:
    """Exchange a Google ID token for a session and cache it.

    Raises ``httpx.HTTPStatusError`` when the server rejects the token; the
    session is left untouched in that case.
    """
    response = await client.post(f"{api_prefix}/auth/google", json={"token": token})
    response.raise_for_status()
    body = response.json()
    session.sign_in(body["token"], body["user"])
    logger.info(f"Signed in as {body['user'].get('email')}")
    return body["user"]
