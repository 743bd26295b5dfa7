"""Form state for composing a new entry."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .catalog import WordCatalog
from .models import Entry


@dataclass
class EntryDraft:
    """Mutable fields collected by the add-word form before saving."""

    title: str = ""
    detail: str = ""
    image_ref: Optional[str] = None
    audio_ref: str = ""
    link_url: str = ""
    tags: List[str] = field(default_factory=list)
    date: datetime.date = field(default_factory=datetime.date.today)

    def add_tag(self, text: str) -> bool:
        tag = text.strip()
        if not tag:
            return False
        self.tags.append(tag)
        return True

    def attach_image(self, ref: Optional[str]) -> None:
        self.image_ref = ref

    def attach_recording(self, locator: Optional[Union[str, Path]]) -> None:
        self.audio_ref = str(locator) if locator else ""

    def build(self) -> Entry:
        return Entry(
            title=self.title,
            detail=self.detail,
            image_ref=self.image_ref,
            audio_ref=self.audio_ref,
            link_url=self.link_url.strip(),
            tags=list(self.tags),
            date=self.date,
        )

    def save_to(self, catalog: WordCatalog) -> Entry:
        entry = self.build()
        catalog.add_entry(entry)
        return entry
