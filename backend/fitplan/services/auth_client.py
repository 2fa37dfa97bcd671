import httpx
import logging
from typing import Optional, Dict, Any

from jose import jwt, JWTError

import config
from fitplan.services.storage import PersistentStore, StorageKey
from fitplan.utils.errors import AuthServiceError

logger = logging.getLogger(__name__)


def _error_message(detail: Any) -> str:
    """Validation errors (422) carry a list of {"msg": ...} entries."""
    if isinstance(detail, list):
        parts = [str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail]
        return "; ".join(p for p in parts if p)
    return str(detail) if detail else ""


class AuthSession:
    """
    Client side of the account API. Keeps the bearer token in the
    persistent store so a session survives restarts.
    """

    def __init__(self, store: PersistentStore, base_url: str = None, client: httpx.Client = None):
        self.store = store
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.client = client if client is not None else httpx.Client(base_url=self.base_url, timeout=10.0)

    def _request(self, method: str, path: str, json: dict = None, headers: dict = None) -> Dict[str, Any]:
        try:
            response = self.client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e}")
            raise AuthServiceError(f"Could not reach the server: {e}") from e

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}
        # Gateways and proxies may answer with arrays, scalars or HTML
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            message = _error_message(data.get("detail") or data.get("message"))
            raise AuthServiceError(message or f"HTTP error! status: {response.status_code}",
                                   status_code=response.status_code)
        return data

    # --- Token handling ---

    def get_token(self) -> Optional[str]:
        token = self.store.get_item(StorageKey.AUTH_TOKEN)
        return token if isinstance(token, str) and token else None

    def is_authenticated(self) -> bool:
        return self.get_token() is not None

    def authorized_headers(self, headers: dict = None) -> dict:
        headers = dict(headers or {})
        token = self.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def get_current_user_from_token(self) -> Optional[Dict[str, Any]]:
        """Reads the token payload without verifying it. A corrupt token is discarded."""
        token = self.get_token()
        if not token:
            return None
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError as e:
            logger.error(f"Failed to decode stored token: {e}")
            self.logout()
            return None
        return {"id": claims.get("userId"), "email": claims.get("email")}

    # --- Account operations ---

    def register(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/register", json={"email": email, "password": password})
        if data.get("token"):
            self.store.store_item(StorageKey.AUTH_TOKEN, data["token"])
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        if data.get("token"):
            self.store.store_item(StorageKey.AUTH_TOKEN, data["token"])
        return data

    def logout(self):
        self.store.remove_item(StorageKey.AUTH_TOKEN)

    def get_my_profile(self) -> Dict[str, Any]:
        if not self.is_authenticated():
            raise AuthServiceError("Not logged in.", status_code=401)
        return self._request("GET", "/me", headers=self.authorized_headers())

    def create_checkout_session(self) -> str:
        data = self._request("POST", "/create-checkout-session", headers=self.authorized_headers())
        url = data.get("url")
        if not url:
            raise AuthServiceError("Checkout session did not return a URL.")
        return url

    def close(self):
        self.client.close()
