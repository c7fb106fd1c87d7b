from __future__ import annotations

from .errors import SchemaError
from .models import DeliveryTarget, MediaQuality, Result


def resolve(result: Result, quality: MediaQuality) -> str:
    variant = result.media_formats.get(quality)
    if variant is None:
        available = ", ".join(sorted(result.media_formats)) or "none"
        raise SchemaError(
            "SCHEMA_VARIANT_MISSING",
            f"Result {result.id} has no '{quality}' variant (available: {available})",
        )
    return variant.url


def link_for(result: Result, target: DeliveryTarget, quality: MediaQuality) -> str:
    if target == "page":
        return result.itemurl
    return resolve(result, quality)
