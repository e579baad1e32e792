"""
Client-side session holder for the DailyDone API.

SessionStore keeps the token and the sanitized user under two keys
(auth_token, user_data) in a small JSON file; DailyDoneClient talks to the
API over httpx and keeps that file in step with the server's answers.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "user_data"

DEFAULT_BASE_URL = "http://localhost:8080/api"


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SessionStore:
    """Persisted token + user. A missing or corrupt file reads as an empty session."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> tuple[str | None, dict[str, Any] | None]:
        data = self._read()
        token = data.get(TOKEN_KEY)
        user = data.get(USER_KEY)
        return (
            token if isinstance(token, str) else None,
            user if isinstance(user, dict) else None,
        )

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({TOKEN_KEY: token, USER_KEY: user}), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP error! status: {response.status_code}"


class DailyDoneClient:
    """
    Session-aware API client.

    Pass http_client to reuse a configured httpx.Client (its base_url must
    point at the API prefix); otherwise one is created for base_url.
    """

    def __init__(
        self,
        store: SessionStore,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.store = store
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self.token: str | None = None
        self.user: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def close(self) -> None:
        self._http.close()

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _set_session(self, token: str, user: dict[str, Any]) -> None:
        self.token = token
        self.user = user
        self.store.save(token, user)

    def _clear_session(self) -> None:
        self.token = None
        self.user = None
        self.store.clear()

    def initialize(self) -> bool:
        """Restore the stored session and re-validate it; clear it unless the server accepts it."""
        token, user = self.store.load()
        if not token or user is None:
            return False
        try:
            response = self._http.get("/auth/verify", headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            logger.warning("Session verification failed: %s", e)
            self._clear_session()
            return False
        if not response.is_success:
            self._clear_session()
            return False
        fresh_user = response.json().get("user") or user
        self._set_session(token, fresh_user)
        return True

    def _authenticate(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = self._http.post(path, json=payload)
        if not response.is_success:
            raise ApiError(_error_message(response), response.status_code)
        data = response.json()
        if not (data.get("success") and data.get("token") and data.get("user")):
            raise ApiError("Invalid response from server", response.status_code)
        self._set_session(data["token"], data["user"])
        return data

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Sign in and persist the session. Returns the response body (includes redirect_url)."""
        return self._authenticate("/auth/login", {"email": email, "password": password})

    def signup(
        self,
        username: str,
        email: str,
        password: str,
        name: str,
        role: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "username": username,
            "email": email,
            "password": password,
            "name": name,
        }
        if role is not None:
            payload["role"] = role
        return self._authenticate("/auth/register", payload)

    def logout(self) -> None:
        """Forget the session locally, then tell the server (best effort)."""
        token = self.token
        self._clear_session()
        if not token:
            return
        try:
            self._http.post("/auth/logout", headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            logger.warning("Logout backend call failed: %s", e)

    def update_user(self, **fields: Any) -> None:
        """Merge fields into the locally stored user without calling the server."""
        if self.user is None or self.token is None:
            return
        self._set_session(self.token, {**self.user, **fields})

    def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Authenticated call. A 401 ends the session before the error is raised."""
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        response = self._http.request(method, path, headers=headers, **kwargs)
        if not response.is_success:
            if response.status_code == 401:
                self._clear_session()
            raise ApiError(_error_message(response), response.status_code)
        return response.json()

    def update_profile(self, **fields: Any) -> dict[str, Any]:
        """PATCH /users/me with camelCase fields; refreshes the stored user."""
        data = self.request("PATCH", "/users/me", json=fields)
        if self.token and data.get("user"):
            self._set_session(self.token, data["user"])
        return data["user"]
