"""Thin async client for the Google Sheets Values API.

Authenticates as a service account: a short-lived RS256 assertion signed
with the account's private key is exchanged for an OAuth access token,
which is cached until shortly before it expires.
"""

import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx
from jose import jwt

from mahjong_ledger.errors import SheetsError

logger = logging.getLogger("mahjong_ledger.dal.sheets_client")

TOKEN_URL = "https://oauth2.googleapis.com/token"
SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"
SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
ASSERTION_LIFETIME_SECONDS = 3600
# Refresh this many seconds before the token actually expires.
TOKEN_REFRESH_MARGIN_SECONDS = 60


class ServiceAccountCredentials:
    """Service-account identity able to mint Sheets access tokens."""

    def __init__(self, email: str, private_key: str) -> None:
        self.email = email
        # Keys pasted into env files usually carry literal "\n" sequences.
        self._private_key = private_key.replace("\\n", "\n")
        self._token: Optional[str] = None
        self._expires_at = 0.0

    def build_assertion(self, now: Optional[int] = None) -> str:
        """Sign the JWT-bearer assertion sent to the token endpoint."""
        issued_at = int(now if now is not None else time.time())
        claims = {
            "iss": self.email,
            "scope": SHEETS_SCOPE,
            "aud": TOKEN_URL,
            "iat": issued_at,
            "exp": issued_at + ASSERTION_LIFETIME_SECONDS,
        }
        return jwt.encode(claims, self._private_key, algorithm="RS256")

    async def get_token(self, http: httpx.AsyncClient) -> str:
        if self._token and time.time() < self._expires_at:
            return self._token

        try:
            response = await http.post(
                TOKEN_URL,
                data={
                    "grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer",
                    "assertion": self.build_assertion(),
                },
            )
        except httpx.RequestError as exc:
            raise SheetsError(f"Could not reach Google OAuth: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            logger.error("Service account token request failed: %s", response.status_code)
            raise SheetsError("Google service account authentication failed")

        payload = response.json()
        self._token = payload["access_token"]
        expires_in = int(payload.get("expires_in", ASSERTION_LIFETIME_SECONDS))
        self._expires_at = time.time() + expires_in - TOKEN_REFRESH_MARGIN_SECONDS
        logger.debug("Obtained Sheets access token for %s", self.email)
        return self._token


class SheetsClient:
    """Values API calls against one spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: str,
        credentials: ServiceAccountCredentials,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._spreadsheet_id = spreadsheet_id
        self._credentials = credentials
        self._http = http or httpx.AsyncClient(timeout=timeout)

    def _url(self, a1_range: str, action: str = "") -> str:
        return (
            f"{SHEETS_API_URL}/{self._spreadsheet_id}/values/"
            f"{quote(a1_range, safe='!:')}{action}"
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        token = await self._credentials.get_token(self._http)
        headers = {"Authorization": f"Bearer {token}"}
        try:
            response = await self._http.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as exc:
            raise SheetsError(f"Could not reach Google Sheets: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            logger.error(
                "Sheets %s %s failed with %s", method, url, response.status_code
            )
            raise SheetsError(
                f"Google Sheets request failed ({response.status_code})"
            )
        return response.json() if response.content else {}

    async def get_values(self, a1_range: str) -> list[list[Any]]:
        data = await self._request(
            "GET",
            self._url(a1_range),
            params={"valueRenderOption": "UNFORMATTED_VALUE"},
        )
        return data.get("values", [])

    async def append_values(self, a1_range: str, rows: list[list[Any]]) -> dict[str, Any]:
        return await self._request(
            "POST",
            self._url(a1_range, ":append"),
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": rows},
        )

    async def update_values(self, a1_range: str, rows: list[list[Any]]) -> dict[str, Any]:
        return await self._request(
            "PUT",
            self._url(a1_range),
            params={"valueInputOption": "RAW"},
            json={"values": rows},
        )

    async def clear_values(self, a1_range: str) -> dict[str, Any]:
        return await self._request("POST", self._url(a1_range, ":clear"))

    async def close(self) -> None:
        await self._http.aclose()
