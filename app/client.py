"""HTTP client for the weight API, usable as a RecordStore by CalendarSync."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

import httpx

from app.core.errors import StoreError
from app.schemas.settings import UserSettingsRead, UserSettingsUpdate
from app.schemas.weight import WeightRecordCreate, WeightRecordRead, WeightRecordUpdate

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)
    return response.text


class ApiRecordStore:
    """RecordStore over the `/api` HTTP surface.

    The httpx client is passed in (base_url already set) so callers own its
    lifecycle and tests can mount the app in-process with ASGITransport.
    """

    def __init__(self, client: httpx.AsyncClient, prefix: str = "/api"):
        self.client = client
        self.prefix = prefix.rstrip("/")

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.prefix}{path}"
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise StoreError(f"{method} {url} failed: {e}") from e
        if response.is_error:
            detail = _error_detail(response)
            logger.warning("%s %s returned %d: %s", method, url, response.status_code, detail)
            raise StoreError(f"{method} {url}: {detail}", status_code=response.status_code)
        return response.json()

    async def list_records(
        self, year: Optional[int] = None, month: Optional[int] = None
    ) -> list[WeightRecordRead]:
        params = {}
        if year is not None and month is not None:
            params = {"year": year, "month": month}
        data = await self._request("GET", "/weights", params=params)
        return [WeightRecordRead.model_validate(item) for item in data]

    async def get_record(self, day: date) -> Optional[WeightRecordRead]:
        data = await self._request("GET", f"/weights/{day.isoformat()}")
        return WeightRecordRead.model_validate(data) if data else None

    async def upsert_record(self, payload: WeightRecordCreate) -> WeightRecordRead:
        data = await self._request("POST", "/weights", json=payload.model_dump(mode="json"))
        return WeightRecordRead.model_validate(data)

    async def update_record(self, day: date, payload: WeightRecordUpdate) -> Optional[WeightRecordRead]:
        try:
            data = await self._request("PUT", f"/weights/{day.isoformat()}", json=payload.model_dump(mode="json"))
        except StoreError as e:
            if e.status_code == 404:
                return None
            raise
        return WeightRecordRead.model_validate(data)

    async def delete_record(self, day: date) -> None:
        await self._request("DELETE", f"/weights/{day.isoformat()}")

    async def get_settings(self) -> UserSettingsRead:
        return UserSettingsRead.model_validate(await self._request("GET", "/settings"))

    async def put_settings(self, payload: UserSettingsUpdate) -> UserSettingsRead:
        data = await self._request("PUT", "/settings", json=payload.model_dump(mode="json"))
        return UserSettingsRead.model_validate(data)
