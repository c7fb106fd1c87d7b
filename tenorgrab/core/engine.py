from __future__ import annotations

import logging
import random
import sys
from typing import Any, TextIO

from .clipboard import ClipboardSink, select_backend
from .environment import Environment
from .errors import SelectionError, TenorGrabError
from .models import DeliveryReport, Result, SearchOptions, SearchResponse
from .resolver import link_for, resolve
from .settings import load_api_key
from .storage import pictures_dir, save_media
from .tenor_client import download_media, search

logger = logging.getLogger(__name__)


def render(response: SearchResponse, options: SearchOptions, out: TextIO) -> int:
    """Write the result set to ``out`` and return the number of lines emitted.

    Extended mode emits a single JSON document for the whole response. The
    normal mode emits one link per result, in the order the API returned them.
    """
    if options.quiet:
        return 0
    if options.extended:
        out.write(response.model_dump_json(indent=2) + "\n")
        return 1
    for result in response.results:
        out.write(link_for(result, options.target, options.quality) + "\n")
    return len(response.results)


def select_index(count: int, rng: random.Random) -> int:
    if count <= 0:
        raise SelectionError("ENGINE_EMPTY_RESULTS", "No results to choose from")
    return rng.randrange(count)


def _clipboard_timeout(settings: dict[str, Any]) -> float | None:
    value = ((settings.get("delivery") or {}).get("clipboard_timeout_sec", 5))
    return float(value) if value is not None else None


def deliver(
    result: Result,
    index: int,
    options: SearchOptions,
    env: Environment,
    settings: dict[str, Any],
    rng: random.Random,
    err: TextIO,
    clipboard: ClipboardSink | None = None,
) -> DeliveryReport:
    page_link = result.itemurl
    media_link = resolve(result, options.quality)
    report = DeliveryReport(
        index=index,
        page_link=page_link,
        media_link=media_link,
        delivered_link=link_for(result, options.target, options.quality),
    )

    if options.copy_link:
        try:
            sink = clipboard or select_backend(env, timeout_sec=_clipboard_timeout(settings))
            sink.deliver(report.delivered_link)
        except TenorGrabError:
            err.write(report.delivered_link + "\n")
            raise
        report.clipboard_backend = sink.name
        logger.info("copied %s to the clipboard (%s)", report.delivered_link, sink.name)

    if options.download:
        try:
            data = download_media(media_link, settings)
            path = save_media(data, media_link, pictures_dir(env, settings), rng)
        except TenorGrabError:
            err.write(media_link + "\n")
            raise
        report.saved_path = str(path)
        logger.info("saved %s", path)

    return report


def run(
    options: SearchOptions,
    env: Environment,
    settings: dict[str, Any],
    rng: random.Random | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
    clipboard: ClipboardSink | None = None,
) -> DeliveryReport | None:
    out = out or sys.stdout
    err = err or sys.stderr
    rng = rng or random.Random()

    api_key = load_api_key(settings, environ=env.variables)
    response = search(options.query, api_key, options.limit, settings)
    render(response, options, out)

    if not options.wants_delivery:
        return None

    index = select_index(len(response.results), rng)
    logger.debug("selected result %d of %d", index, len(response.results))
    return deliver(response.results[index], index, options, env, settings, rng, err, clipboard=clipboard)
