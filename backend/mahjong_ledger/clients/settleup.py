"""Async client for the Settle Up ledger.

Settle Up runs on Firebase: accounts sign in through the Identity Toolkit
REST API, and groups, members, transactions and debts are plain Realtime
Database paths (``/<path>.json?auth=<id token>``).
"""

import logging
from http import HTTPStatus
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from mahjong_ledger.config import settings
from mahjong_ledger.errors import LedgerAuthError, LedgerError
from mahjong_ledger.models.settlement import LedgerMember

logger = logging.getLogger("mahjong_ledger.clients.settleup")

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

_BAD_CREDENTIALS = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "USER_DISABLED",
}


class LedgerSession(BaseModel):
    """Result of a successful Settle Up login."""
    member_id: str
    token: str


class SettleUpClient:
    """REST calls against one Settle Up environment."""

    def __init__(
        self,
        database_url: str,
        api_key: str,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._database_url = database_url.rstrip("/")
        self._api_key = api_key
        self._http = http or httpx.AsyncClient(timeout=timeout)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> LedgerSession:
        """Exchange account credentials for a Firebase id token.

        Raises:
            LedgerAuthError: Credentials rejected or not configured.
            LedgerError: Settle Up unreachable or returned an error.
        """
        if not email or not password:
            raise LedgerAuthError("Settle Up credentials are not configured")
        try:
            response = await self._http.post(
                SIGN_IN_URL,
                params={"key": self._api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
            )
        except httpx.RequestError as e:
            raise LedgerError(f"Failed to connect to Settle Up: {e}") from e

        if response.status_code != HTTPStatus.OK:
            code = _error_code(response)
            logger.warning("Settle Up login rejected: %s", code or response.status_code)
            if code.split(" ")[0] in _BAD_CREDENTIALS:
                raise LedgerAuthError("Invalid Settle Up email or password.")
            if code.startswith("INVALID_EMAIL"):
                raise LedgerAuthError("Invalid email format provided.")
            raise LedgerError(f"Settle Up authentication failed: {code or response.status_code}")

        data = response.json()
        logger.info("Settle Up login successful for uid=%s", data.get("localId"))
        return LedgerSession(member_id=data["localId"], token=data["idToken"])

    # ------------------------------------------------------------------
    # Realtime Database paths
    # ------------------------------------------------------------------

    async def _call(
        self,
        method: str,
        path: str,
        token: str,
        json: Any = None,
    ) -> Any:
        url = f"{self._database_url}/{path}.json"
        try:
            response = await self._http.request(
                method, url, params={"auth": token}, json=json
            )
        except httpx.RequestError as e:
            raise LedgerError(f"Failed to connect to Settle Up: {e}") from e

        if response.status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            raise LedgerAuthError(
                f"Settle Up refused access to {path}; the token may have expired"
            )
        if response.status_code == HTTPStatus.NOT_FOUND:
            logger.warning("Settle Up path %s not found", path)
            return None
        if response.status_code != HTTPStatus.OK:
            logger.error("Settle Up %s %s failed: %s", method, path, response.status_code)
            raise LedgerError(f"Settle Up API error ({response.status_code}) on {path}")
        return response.json()

    async def list_user_groups(self, member_id: str, token: str) -> list[str]:
        """Ids of the groups the signed-in account belongs to."""
        data = await self._call("GET", f"userGroups/{member_id}", token)
        return list(data) if data else []

    async def get_group(self, group_id: str, token: str) -> Optional[dict[str, Any]]:
        return await self._call("GET", f"groups/{group_id}", token)

    async def list_members(self, group_id: str, token: str) -> list[LedgerMember]:
        data = await self._call("GET", f"members/{group_id}", token)
        if data is None:
            raise LedgerError(f"Could not fetch members for group {group_id}")
        return [
            LedgerMember(
                id=member_id,
                name=str(info.get("name", "")),
                active=info.get("active", True) is not False,
            )
            for member_id, info in data.items()
            if isinstance(info, dict)
        ]

    async def submit_expense(
        self,
        group_id: str,
        token: str,
        payload: dict[str, Any],
    ) -> str:
        """Post a transaction and return its generated id."""
        data = await self._call("POST", f"transactions/{group_id}", token, json=payload)
        if not data or "name" not in data:
            raise LedgerError("Settle Up did not return a transaction id")
        logger.info("Submitted transaction %s to group %s", data["name"], group_id)
        return data["name"]

    async def list_debts(self, group_id: str, token: str) -> list[dict[str, Any]]:
        """Raw debt entries; validation is left to the debt normalizer."""
        data = await self._call("GET", f"debts/{group_id}", token)
        if data is None:
            return []
        entries = data.values() if isinstance(data, dict) else data
        return [entry for entry in entries if isinstance(entry, dict)]

    async def close(self) -> None:
        await self._http.aclose()


def _error_code(response: httpx.Response) -> str:
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        return ""
    if isinstance(error, dict):
        return str(error.get("message", ""))
    return str(error or "")


# ---------------------------------------------------------------------------
# Process-wide client
# ---------------------------------------------------------------------------

_client: SettleUpClient | None = None


def get_settleup_client() -> SettleUpClient:
    """Return the shared client, creating it from settings on first use."""
    global _client
    if _client is None:
        _client = SettleUpClient(
            settings.settleup_database_url,
            settings.SETTLEUP_API_KEY,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    return _client


def use_settleup_client(client: SettleUpClient | None) -> None:
    """Install a client directly (scripts and tests)."""
    global _client
    _client = client


async def close_settleup_client() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None
