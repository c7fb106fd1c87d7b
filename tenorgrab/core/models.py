from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

MediaQuality = Literal[
    "gif",
    "mediumgif",
    "tinygif",
    "nanogif",
    "preview",
    "mp4",
    "loopedmp4",
    "tinymp4",
    "nanomp4",
    "webm",
    "tinywebm",
    "nanowebm",
    "gifpreview",
    "tinygifpreview",
    "nanogifpreview",
]
MEDIA_QUALITIES: tuple[str, ...] = get_args(MediaQuality)

DeliveryTarget = Literal["page", "media"]
DELIVERY_TARGETS: tuple[str, ...] = get_args(DeliveryTarget)


class Variant(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    size: int = 0
    duration: float | None = None
    dims: list[int] = Field(default_factory=list)


class Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    created: float
    content_description: str = ""
    itemurl: str
    url: str
    tags: list[str] = Field(default_factory=list)
    media_formats: dict[str, Variant] = Field(min_length=1)


class SearchResponse(BaseModel):
    results: list[Result] = Field(default_factory=list)
    next: str = ""


class SearchOptions(BaseModel):
    query: str
    limit: int = Field(default=10, ge=1, le=50)
    copy_link: bool = False
    download: bool = False
    target: DeliveryTarget = "page"
    quality: MediaQuality = "gif"
    quiet: bool = False
    extended: bool = False

    @property
    def wants_delivery(self) -> bool:
        return self.copy_link or self.download


class DeliveryReport(BaseModel):
    index: int
    page_link: str
    media_link: str
    delivered_link: str
    clipboard_backend: str | None = None
    saved_path: str | None = None
