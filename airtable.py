"""Remote records API client for the storefront base."""

from __future__ import annotations

import asyncio
import json
import logging
from urllib.parse import quote

import aiohttp

import config
from exceptions import RemoteCallException
from utils.formula import Formula

logger = logging.getLogger(__name__)


def _chunks(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


class AirtableTable:
    """Record operations on a single table of the base."""

    def __init__(self, client: 'AirtableClient', name: str):
        self.client = client
        self.name = name

    @property
    def url(self) -> str:
        return self.client.table_url(self.name)

    async def list(self, formula: Formula | str | None = None, sort_field: str | None = None,
                   sort_direction: str = "asc", fields: list[str] | None = None,
                   max_records: int | None = None) -> list[dict]:
        """
        Fetch every record matching the formula.

        Follows the offset cursor until the server stops returning one, so the
        caller always gets the complete result.
        """
        params: list[tuple[str, str]] = []
        if formula is not None:
            params.append(("filterByFormula", str(formula)))
        if sort_field:
            params.append(("sort[0][field]", sort_field))
            params.append(("sort[0][direction]", sort_direction))
        for field in fields or []:
            params.append(("fields[]", field))
        if max_records is not None:
            params.append(("maxRecords", str(max_records)))

        records: list[dict] = []
        offset = None
        while True:
            page_params = params + ([("offset", offset)] if offset else [])
            payload = await self.client.request("GET", self.url, params=page_params)
            records.extend(payload.get("records", []))
            offset = payload.get("offset")
            if not offset:
                break
            if max_records is not None and len(records) >= max_records:
                break
        if max_records is not None:
            records = records[:max_records]
        return records

    async def first(self, formula: Formula | str | None = None, sort_field: str | None = None,
                    sort_direction: str = "asc", fields: list[str] | None = None) -> dict | None:
        records = await self.list(formula, sort_field, sort_direction, fields, max_records=1)
        return records[0] if records else None

    async def get(self, record_id: str) -> dict | None:
        try:
            return await self.client.request("GET", self.client.table_url(self.name, record_id))
        except RemoteCallException as e:
            if e.is_not_found:
                return None
            raise

    async def create(self, fields: dict) -> dict:
        return await self.client.request("POST", self.url, body={"fields": fields})

    async def create_many(self, fields_list: list[dict]) -> list[dict]:
        created = []
        for chunk in _chunks(fields_list, config.AIRTABLE_BATCH_LIMIT):
            payload = await self.client.request(
                "POST", self.url, body={"records": [{"fields": fields} for fields in chunk]}
            )
            created.extend(payload.get("records", []))
        return created

    async def patch(self, record_id: str, fields: dict) -> dict:
        return await self.client.request(
            "PATCH", self.client.table_url(self.name, record_id), body={"fields": fields}
        )

    async def batch_patch(self, records: list[dict]) -> None:
        """Patch many records; records are {"id": ..., "fields": {...}} dicts."""
        for chunk in _chunks(records, config.AIRTABLE_BATCH_LIMIT):
            await self.client.request("PATCH", self.url, body={"records": chunk})


class AirtableClient:
    """
    Async client of the remote records API.

    Owns a single aiohttp session that is opened on first use. Use as an async
    context manager, or call close() when done.
    """

    RETRYABLE_METHODS = {"GET"}

    def __init__(self, api_key: str | None = None, base_id: str | None = None,
                 api_url: str | None = None, timeout: float | None = None,
                 read_retries: int | None = None):
        self.api_key = api_key if api_key is not None else config.AIRTABLE_API_KEY
        self.base_id = base_id if base_id is not None else config.AIRTABLE_BASE_ID
        self.api_url = (api_url or config.AIRTABLE_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT_SECONDS
        self.read_retries = read_retries if read_retries is not None else config.AIRTABLE_READ_RETRIES
        self._session: aiohttp.ClientSession | None = None
        self._tables: dict[str, AirtableTable] = {}

    async def __aenter__(self) -> 'AirtableClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def table(self, name: str) -> AirtableTable:
        if name not in self._tables:
            self._tables[name] = AirtableTable(self, name)
        return self._tables[name]

    def table_url(self, name: str, record_id: str | None = None) -> str:
        url = f"{self.api_url}/{self.base_id}/{quote(name, safe='')}"
        if record_id:
            url += f"/{quote(record_id, safe='')}"
        return url

    async def request(self, method: str, url: str, params: list | None = None,
                      body: dict | None = None) -> dict:
        """
        Send one API request and return the decoded JSON body.

        Non-2xx answers and network failures raise RemoteCallException. Reads are
        retried on network failures, 429 and 5xx; writes are sent exactly once.
        """
        attempts = 1 + (self.read_retries if method in self.RETRYABLE_METHODS else 0)
        last_error: RemoteCallException | None = None

        for attempt in range(1, attempts + 1):
            try:
                session = self._get_session()
                async with session.request(method, url, params=params, json=body) as response:
                    text = await response.text()
                    if 200 <= response.status < 300:
                        return json.loads(text) if text else {}
                    last_error = RemoteCallException(response.status, text, url)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = RemoteCallException(None, str(e) or type(e).__name__, url)

            if attempt >= attempts or not last_error.is_retryable:
                break
            logger.warning(f"[Remote] {method} {url} failed (attempt {attempt}/{attempts}): {last_error}")
            await asyncio.sleep(config.AIRTABLE_RETRY_BACKOFF_SECONDS * attempt)

        if last_error.is_not_found:
            logger.debug(f"[Remote] {method} {url} not found")
        else:
            logger.error(f"[Remote] {method} {url} failed: {last_error}")
        raise last_error
