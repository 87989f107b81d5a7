from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from postgate.services.policy import Principal

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"
REFRESH_PATH = "/api/auth/refresh"
# A 401 from these endpoints means bad credentials, not a stale access token.
NO_REFRESH_PATHS = frozenset({LOGIN_PATH, REFRESH_PATH})

AuthListener = Callable[[Optional[str], Optional[Principal]], None]


class AuthExpiredError(Exception):
    """Refreshing the access token failed; the caller has to log in again."""


@dataclass(slots=True)
class ApiClientConfig:
    base_url: str
    timeout_seconds: int = 30


class PostsApiClient:
    """HTTP client for the posts API that owns its authentication state.

    State (tokens, principal, refresh bookkeeping) lives on the instance. When a
    request comes back 401, one caller refreshes the access token while any other
    caller that hit 401 meanwhile waits on the condition and then retries with the
    new token, or fails with the same error if the refresh failed.
    """

    def __init__(
        self,
        config: ApiClientConfig,
        session: Optional[requests.Session] = None,
        on_auth_change: Optional[AuthListener] = None,
    ):
        self.config = config
        self.session = session or requests.Session()
        self.on_auth_change = on_auth_change
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.principal: Optional[Principal] = None
        self._cond = threading.Condition()
        self._refreshing = False
        self._refresh_error: Optional[Exception] = None

    @property
    def refresh_in_flight(self) -> bool:
        with self._cond:
            return self._refreshing

    # -- auth ---------------------------------------------------------------

    def login(self, username: str, password: str) -> Principal:
        response = self.request("POST", LOGIN_PATH, json={"username": username, "password": password})
        response.raise_for_status()
        body = response.json()
        self.refresh_token = body.get("refresh_token")
        self._set_auth(body["access_token"], Principal.from_payload(body))
        return self.principal

    def logout(self) -> None:
        self.refresh_token = None
        self._set_auth(None, None)

    def me(self) -> Principal:
        body = self._json("GET", "/api/auth/me")
        self.principal = Principal.from_payload(body)
        return self.principal

    # -- posts / users ------------------------------------------------------

    def list_posts(self, limit: Optional[int] = None, offset: Optional[int] = None, sort: Optional[str] = None) -> dict:
        params = {k: v for k, v in {"limit": limit, "offset": offset, "sort": sort}.items() if v is not None}
        return self._json("GET", "/api/posts", params=params)

    def create_post(self, title: str, content: str) -> dict:
        return self._json("POST", "/api/posts", json={"title": title, "content": content})

    def update_post(self, post_id, title: Optional[str] = None, content: Optional[str] = None) -> dict:
        payload = {k: v for k, v in {"title": title, "content": content}.items() if v is not None}
        return self._json("PUT", f"/api/posts/{post_id}", json=payload)["post"]

    def delete_post(self, post_id) -> dict:
        return self._json("DELETE", f"/api/posts/{post_id}")

    def list_users(self, limit: Optional[int] = None, offset: Optional[int] = None) -> dict:
        params = {k: v for k, v in {"limit": limit, "offset": offset}.items() if v is not None}
        return self._json("GET", "/api/users", params=params)

    # -- transport ----------------------------------------------------------

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Send a request, refreshing the access token once on 401."""
        token = self.access_token
        response = self._send(method, path, token, **kwargs)
        if response.status_code != 401 or path in NO_REFRESH_PATHS or self.refresh_token is None:
            return response
        new_token = self._refresh_access_token(stale_token=token)
        return self._send(method, path, new_token, **kwargs)

    def _json(self, method: str, path: str, **kwargs) -> dict:
        response = self.request(method, path, **kwargs)
        response.raise_for_status()
        return response.json()

    def _send(self, method: str, path: str, token: Optional[str], *, headers: Optional[dict] = None, **kwargs):
        merged = dict(headers or {})
        if token:
            merged["Authorization"] = f"Bearer {token}"
        url = f"{self.config.base_url.rstrip('/')}{path}"
        return self.session.request(method, url, headers=merged, timeout=self.config.timeout_seconds, **kwargs)

    def _refresh_access_token(self, stale_token: Optional[str]) -> str:
        with self._cond:
            if self._refreshing:
                self._cond.wait_for(lambda: not self._refreshing)
                if self._refresh_error is not None:
                    raise self._refresh_error
                return self.access_token
            if self.access_token is not None and self.access_token != stale_token:
                # Another caller already refreshed after our request went out.
                return self.access_token
            self._refreshing = True
            self._refresh_error = None

        error: Optional[Exception] = None
        try:
            response = self._send("POST", REFRESH_PATH, self.refresh_token)
            if response.status_code != 200:
                raise AuthExpiredError(f"token refresh failed with status {response.status_code}")
            body = response.json()
            self._set_auth(body["access_token"], Principal.from_payload(body["user"]))
            return self.access_token
        except AuthExpiredError as exc:
            error = exc
            self._clear_after_failed_refresh(exc)
            raise
        except (requests.RequestException, KeyError, ValueError) as exc:
            error = AuthExpiredError(str(exc))
            self._clear_after_failed_refresh(exc)
            raise error from exc
        finally:
            with self._cond:
                self._refreshing = False
                self._refresh_error = error
                self._cond.notify_all()

    def _clear_after_failed_refresh(self, exc: Exception) -> None:
        logger.warning("Token refresh failed: %s", exc)
        self.refresh_token = None
        self._set_auth(None, None)

    def _set_auth(self, token: Optional[str], principal: Optional[Principal]) -> None:
        self.access_token = token
        self.principal = principal
        if self.on_auth_change is not None:
            self.on_auth_change(token, principal)
