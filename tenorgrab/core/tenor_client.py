from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from .errors import ConfigError, SchemaError, TransportError
from .models import SearchResponse
from .settings import tenor_config

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://tenor.googleapis.com/v2"
USER_AGENT = "tenorgrab/0.1"
MAX_LIMIT = 50


def search(query: str, api_key: str, limit: int, settings: dict[str, Any]) -> SearchResponse:
    if not 1 <= limit <= MAX_LIMIT:
        raise ConfigError("CONFIG_BAD_LIMIT", f"Result count must be between 1 and {MAX_LIMIT}, got {limit}")

    cfg = tenor_config(settings)
    base_url = str(cfg.get("base_url", DEFAULT_BASE_URL)).rstrip("/")
    timeout_sec = int(cfg.get("request_timeout_sec", 20))
    params: dict[str, Any] = {
        "q": query,
        "key": api_key,
        "client_key": str(cfg.get("client_key", "tenorgrab")),
        "limit": limit,
    }
    for name in ("contentfilter", "locale", "media_filter"):
        if cfg.get(name):
            params[name] = cfg[name]

    logger.debug("searching tenor for %r (limit=%d)", query, limit)
    try:
        resp = requests.get(
            f"{base_url}/search",
            params=params,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout_sec,
        )
    except requests.RequestException as exc:
        raise TransportError("TRANSPORT_REQUEST_FAILED", f"Tenor search request failed: {exc}") from exc

    if resp.status_code != 200:
        raise TransportError("TRANSPORT_HTTP_STATUS", f"Tenor search returned HTTP {resp.status_code}")

    try:
        payload = resp.json()
    except ValueError as exc:
        raise SchemaError("SCHEMA_BAD_JSON", "Tenor returned malformed JSON") from exc

    try:
        response = SearchResponse.model_validate(payload)
    except ValidationError as exc:
        raise SchemaError("SCHEMA_BAD_RESPONSE", f"Unexpected Tenor response shape: {exc}") from exc
    logger.debug("tenor returned %d results", len(response.results))
    return response


def download_media(url: str, settings: dict[str, Any]) -> bytes:
    timeout_sec = int(tenor_config(settings).get("download_timeout_sec", 60))
    try:
        resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout_sec, stream=True)
        resp.raise_for_status()
        chunks = [chunk for chunk in resp.iter_content(chunk_size=64 * 1024) if chunk]
    except requests.Timeout as exc:
        raise TransportError("TRANSPORT_TIMEOUT", f"Media download timed out after {timeout_sec}s") from exc
    except requests.RequestException as exc:
        raise TransportError("TRANSPORT_DOWNLOAD_FAILED", f"Media download failed: {exc}") from exc

    data = b"".join(chunks)
    if not data:
        raise TransportError("TRANSPORT_EMPTY_BODY", f"No content returned for {url}")
    return data
