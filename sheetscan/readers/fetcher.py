"""
Remote Table Fetcher - one blocking fetch of a spreadsheet table as JSON

Builds the gviz query URL, issues a single GET, strips the response
envelope and extracts the row array at ``table.rows``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List
from urllib.parse import quote

import httpx

from sheetscan.core.config import AdapterConfig, EnvelopeMode, TableRequest
from sheetscan.core.errors import (
    InvalidEnvelopeError,
    MalformedResponseError,
    TransportError,
    UnexpectedShapeError,
)

logger = logging.getLogger(__name__)

GVIZ_PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("
GVIZ_SUFFIX = ");"
XSSI_PREFIX = ")]}'"

QUERY_SUFFIX = "gviz/tq?tqx=out:json"

RemoteRow = Dict[str, Any]


@dataclass
class RemoteTable:
    """Rows and column metadata of one fetched table"""

    rows: List[RemoteRow]
    cols: List[Dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def build_url(config: AdapterConfig, request: TableRequest) -> str:
    """
    Build the fetch URL for a table

    Example:
        https://docs.google.com/spreadsheets/d/<object>/gviz/tq?tqx=out:json&sheet=Sales
    """
    url = f"{config.base_url}/{quote(request.object_identifier, safe='')}/{QUERY_SUFFIX}"
    if request.sheet:
        url += f"&sheet={quote(request.sheet, safe='')}"
    if request.gid:
        url += f"&gid={quote(request.gid, safe='')}"
    return url


def unwrap_envelope(body: str, mode: EnvelopeMode) -> str:
    """
    Strip the framing around the JSON payload

    Args:
        body: Raw response body
        mode: Framing the API is expected to use

    Returns:
        The JSON text inside the envelope

    Raises:
        InvalidEnvelopeError: If the body is empty or the required framing is absent
    """
    if not body or not body.strip():
        raise InvalidEnvelopeError("Empty response body")

    if mode == EnvelopeMode.PLAIN:
        return body

    if mode == EnvelopeMode.XSSI:
        if not body.startswith(XSSI_PREFIX):
            raise InvalidEnvelopeError(f"Response does not start with {XSSI_PREFIX!r}")
        return body[len(XSSI_PREFIX):]

    # gviz: prefix and closing suffix are both required
    if not body.startswith(GVIZ_PREFIX):
        raise InvalidEnvelopeError(
            "Response does not start with the google.visualization.Query.setResponse( wrapper"
        )
    inner = body[len(GVIZ_PREFIX):].rstrip()
    if not inner.endswith(GVIZ_SUFFIX):
        raise InvalidEnvelopeError(f"Response wrapper is not closed with {GVIZ_SUFFIX!r}")
    return inner[: -len(GVIZ_SUFFIX)]


def extract_table(payload: Any) -> RemoteTable:
    """
    Locate the row array at ``table.rows``

    Raises:
        UnexpectedShapeError: If the path is missing or not an array
    """
    if isinstance(payload, dict) and payload.get("status") == "error":
        errors = payload.get("errors")
        details = [
            str(e.get("detailed_message") or e.get("message") or e.get("reason") or "")
            for e in (errors if isinstance(errors, list) else [])
            if isinstance(e, dict)
        ]
        messages = "; ".join(d for d in details if d)
        raise UnexpectedShapeError(f"Remote API returned an error: {messages or 'unknown error'}")

    table = payload.get("table") if isinstance(payload, dict) else None
    rows = table.get("rows") if isinstance(table, dict) else None
    if not isinstance(rows, list):
        raise UnexpectedShapeError("Response has no row array at 'table.rows'")

    cols = table.get("cols")
    return RemoteTable(rows=rows, cols=cols if isinstance(cols, list) else [])


class RemoteTableFetcher:
    """
    Fetch a remote spreadsheet table

    One attempt per call: no retries, no caching, no timeout. A hung
    connection blocks the caller.

    Example:
        fetcher = RemoteTableFetcher(AdapterConfig())
        rows = fetcher.fetch(TableRequest("1AbC..."))
    """

    def __init__(self, config: AdapterConfig):
        self.config = config

    def headers(self) -> Dict[str, str]:
        """Headers sent with the request"""
        headers = {"User-Agent": self.config.user_agent}
        if self.config.envelope == EnvelopeMode.XSSI:
            headers["X-DataSource-Auth"] = "true"
        return headers

    def fetch(self, request: TableRequest) -> List[RemoteRow]:
        """Fetch a table and return its rows in source order"""
        return self.fetch_table(request).rows

    def fetch_table(self, request: TableRequest) -> RemoteTable:
        """Fetch a table and return its rows together with column metadata"""
        url = build_url(self.config, request)
        logger.info("Requesting URL: %s", url)

        try:
            response = httpx.get(
                url, headers=self.headers(), follow_redirects=True, timeout=None
            )
            response.raise_for_status()
        except Exception as e:
            logger.error("Failed to fetch %s: %s", url, e)
            raise TransportError(f"Failed to fetch {url}: {e}") from e

        try:
            body = unwrap_envelope(response.text, self.config.envelope)
        except InvalidEnvelopeError as e:
            logger.error("Invalid response envelope from %s: %s", url, e)
            raise

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse JSON from %s: %s", url, e)
            raise MalformedResponseError(f"Invalid JSON from {url}: {e}") from e

        try:
            table = extract_table(payload)
        except UnexpectedShapeError as e:
            logger.error("%s (%s)", e, url)
            raise

        logger.info("Fetched %d rows from %s", len(table), request.object_identifier)
        return table
