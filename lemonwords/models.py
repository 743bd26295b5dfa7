"""Dataclasses describing the objects lemonwords works with."""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from typing import List, Optional


def _new_entry_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True)
class Entry:
    """A single word record.

    Media fields only hold locators. The image and audio files themselves belong
    to whoever captured them.
    """

    title: str
    detail: str = ""
    image_ref: Optional[str] = None
    audio_ref: str = ""
    link_url: str = ""
    tags: List[str] = field(default_factory=list)
    date: datetime.date = field(default_factory=datetime.date.today)
    id: str = field(default_factory=_new_entry_id)

    @property
    def has_image(self) -> bool:
        return self.image_ref is not None

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_ref)

    @property
    def has_link(self) -> bool:
        return bool(self.link_url)


@dataclass(slots=True)
class Config:
    """User configuration stored on disk."""

    wordcloud_url: str = "http://127.0.0.1:5000"
    api_timeout: Optional[float] = None
    verify_ssl: bool = True
    recordings_dir: Optional[str] = None
    sample_rate: int = 12000
    channels: int = 1
    wordcloud_output: Optional[str] = None
    log_level: str = "WARNING"
