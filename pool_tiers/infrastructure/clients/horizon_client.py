from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from pool_tiers.domain.entities.pool_tier import PoolReserve, PoolSnapshot
from pool_tiers.domain.exceptions import SourceUnavailableError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HorizonClientSettings:
    horizon_url: str
    page_limit: int = 200
    max_pages: int = 1
    timeout_seconds: float = 10.0


def _as_int(value) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _map_reserve(raw) -> PoolReserve:
    if not isinstance(raw, dict):
        return PoolReserve(asset=None, amount=None)
    asset = raw.get("asset")
    amount = raw.get("amount")
    return PoolReserve(
        asset=str(asset) if asset is not None else None,
        amount=str(amount) if amount is not None else None,
    )


def map_pool_record(record: dict) -> PoolSnapshot:
    pool_id = record.get("id")
    if not pool_id:
        raise SourceUnavailableError("Horizon pool record without id.")
    raw_reserves = record.get("reserves") or []
    if not isinstance(raw_reserves, list):
        raw_reserves = [raw_reserves]
    last_modified = record.get("last_modified_time") or record.get("last_modified_ledger")
    return PoolSnapshot(
        pool_id=str(pool_id),
        reserves=tuple(_map_reserve(item) for item in raw_reserves),
        total_accounts=_as_int(record.get("total_accounts")),
        total_shares=str(record.get("total_shares") or "0"),
        last_modified=str(last_modified) if last_modified is not None else None,
    )


def _extract_records(payload) -> list[dict]:
    if not isinstance(payload, dict):
        raise SourceUnavailableError("Horizon response is not a JSON object.")
    embedded = payload.get("_embedded")
    container = embedded if isinstance(embedded, dict) else payload
    records = container.get("records")
    if not isinstance(records, list):
        raise SourceUnavailableError("Horizon response has no records list.")
    if not all(isinstance(item, dict) for item in records):
        raise SourceUnavailableError("Horizon records must be JSON objects.")
    return records


def _next_link(payload: dict) -> str | None:
    links = payload.get("_links")
    if not isinstance(links, dict):
        return None
    next_link = links.get("next")
    if not isinstance(next_link, dict):
        return None
    href = next_link.get("href")
    return str(href) if href else None


class HorizonPoolSourceClient:
    """Reads liquidity pools from a Horizon server.

    A single page is fetched unless ``max_pages`` allows following the
    ``next`` link. There is no retry here; a failed fetch is retried by the
    next scheduler tick.
    """

    def __init__(
        self,
        settings: HorizonClientSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    def fetch_pools(self) -> list[PoolSnapshot]:
        url: str | None = f"{self._settings.horizon_url.rstrip('/')}/liquidity_pools"
        params: dict | None = {"limit": self._settings.page_limit, "order": "desc"}
        snapshots: list[PoolSnapshot] = []
        pages = 0

        with httpx.Client(
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        ) as client:
            while url and pages < self._settings.max_pages:
                payload = self._get_page(client, url=url, params=params)
                records = _extract_records(payload)
                snapshots.extend(map_pool_record(record) for record in records)
                pages += 1
                if len(records) < self._settings.page_limit:
                    break
                url = _next_link(payload)
                params = None

        logger.info(
            "horizon_client: fetched_pools pools=%s pages=%s url=%s",
            len(snapshots),
            pages,
            self._settings.horizon_url,
        )
        return snapshots

    def _get_page(self, client: httpx.Client, *, url: str, params: dict | None) -> dict:
        try:
            response = client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(f"Horizon request failed: {exc}") from exc

        if not response.is_success:
            raise SourceUnavailableError(f"Horizon API error: {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise SourceUnavailableError("Horizon response is not valid JSON.") from exc
