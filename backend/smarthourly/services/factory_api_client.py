"""
Factory API client — customer and MO reference data.

Clients and their MO numbers are owned by the external factory-management API
and never persisted here. MO numbers are cached in memory per client id; a
failed fetch leaves the cache exactly as it was.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from smarthourly.config import settings
from smarthourly.core.exceptions import RemoteUnavailableError


logger = logging.getLogger(__name__)

SERVICE_NAME = "Factory API"

LOGIN_PATH = "/api/TokenAuth/Authenticate"
CLIENTS_PATH = "/client/api/v1/Client/GetAll"
MO_NUMBERS_PATH = "/meterreport/api/v1/MeterReportService/GetMONumbersByClient"


def _result_items(payload: Any) -> List[Any]:
    if not isinstance(payload, dict):
        return payload if isinstance(payload, list) else []
    result = payload.get("result", payload)
    if isinstance(result, dict):
        result = result.get("items", [])
    return result if isinstance(result, list) else []


def _mo_number(item: Any) -> Optional[str]:
    if isinstance(item, dict):
        for key in ("moNumber", "mO_Number", "mo_Number", "moNo", "MONumber"):
            if item.get(key):
                return str(item[key]).strip()
        return None
    text = str(item).strip() if item is not None else ""
    return text or None


class FactoryApiHttpError(RemoteUnavailableError):
    def __init__(self, path: str, status_code: Optional[int]):
        super().__init__(SERVICE_NAME, f"{path} returned HTTP {status_code}")
        self.status_code = status_code


class FactoryApiClient:
    """Thin synchronous client over a shared ``requests.Session``."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        tenant_id: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.FACTORY_API_BASE_URL).rstrip("/")
        self.username = username if username is not None else settings.FACTORY_API_USER
        self.password = password if password is not None else settings.FACTORY_API_PASS
        self.tenant_id = tenant_id or settings.FACTORY_API_TENANT_ID
        self.timeout = timeout or settings.FACTORY_API_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self._token: Optional[str] = None
        self._mo_cache: Dict[int, List[str]] = {}
        self._lock = threading.Lock()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.Timeout as exc:
            logger.warning("factory_api_timeout method=%s path=%s", method, path)
            raise RemoteUnavailableError(SERVICE_NAME, f"request to {path} timed out") from exc
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.warning("factory_api_http_error method=%s path=%s status=%s", method, path, status)
            raise FactoryApiHttpError(path, status) from exc
        except requests.RequestException as exc:
            logger.warning("factory_api_unreachable method=%s path=%s error=%s", method, path, exc)
            raise RemoteUnavailableError(SERVICE_NAME, str(exc)) from exc
        except ValueError as exc:
            raise RemoteUnavailableError(SERVICE_NAME, f"{path} returned invalid JSON") from exc

    def login(self) -> str:
        payload = self._request(
            "POST",
            LOGIN_PATH,
            headers={
                "accept": "text/plain",
                "Content-Type": "application/json-patch+json",
                "Abp.TenantId": self.tenant_id,
            },
            json={
                "userNameOrEmailAddress": self.username,
                "password": self.password,
                "rememberClient": False,
            },
        )
        token = ((payload or {}).get("result") or {}).get("accessToken") if isinstance(payload, dict) else None
        if not token:
            raise RemoteUnavailableError(SERVICE_NAME, "login response did not include an access token")
        self._token = token
        return token

    def _authorized_get(self, path: str, params: Optional[dict] = None) -> Any:
        token = self._token or self.login()
        try:
            return self._request("GET", path, params=params, headers={"Authorization": f"Bearer {token}"})
        except FactoryApiHttpError as exc:
            # Token may have expired; re-authenticate once.
            if exc.status_code != 401:
                raise
            token = self.login()
            return self._request("GET", path, params=params, headers={"Authorization": f"Bearer {token}"})

    def get_clients(self) -> List[Dict[str, Any]]:
        clients = []
        for item in _result_items(self._authorized_get(CLIENTS_PATH, params={"skipCount": 0, "maxResultCount": 1000})):
            if not isinstance(item, dict) or item.get("id") is None:
                continue
            name = item.get("client_Name") or item.get("clientName") or item.get("name") or ""
            clients.append({"id": int(item["id"]), "name": str(name).strip()})
        return clients

    def get_mo_numbers(self, client_id: int) -> List[str]:
        with self._lock:
            cached = self._mo_cache.get(client_id)
        if cached is not None:
            return list(cached)

        items = _result_items(self._authorized_get(MO_NUMBERS_PATH, params={"Id": client_id}))
        mo_numbers = list(dict.fromkeys(n for n in (_mo_number(i) for i in items) if n))
        with self._lock:
            self._mo_cache[client_id] = mo_numbers
        return list(mo_numbers)

    def clear_cache(self) -> None:
        with self._lock:
            self._mo_cache.clear()


factory_api_client = FactoryApiClient()


def get_factory_api_client() -> FactoryApiClient:
    return factory_api_client
