"""Playback of recorded audio."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import unquote, urlparse


def resolve_locator(locator: str) -> Optional[Path]:
    """Turn a plain path or ``file://`` URL into a local path."""

    if not locator:
        return None
    parsed = urlparse(locator)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if parsed.scheme and len(parsed.scheme) > 1:
        return None
    return Path(locator).expanduser()


class AudioPlayer:
    """Play audio files through the default output device."""

    def __init__(self, sd: Any = None) -> None:
        self._sd = sd

    def play(self, locator: str) -> bool:
        path = resolve_locator(locator)
        if path is None:
            logging.warning("Cannot resolve audio locator %r.", locator)
            return False
        try:
            import soundfile as sf

            data, samplerate = sf.read(path)
        except Exception as exc:
            logging.warning("Failed to read audio file %s: %s", path, exc)
            return False
        try:
            self._load_sounddevice().play(data, samplerate)
        except Exception as exc:
            logging.warning("Failed to play audio file %s: %s", path, exc)
            return False
        return True

    def wait(self) -> None:
        if self._sd is not None:
            self._sd.wait()

    def stop(self) -> None:
        if self._sd is not None:
            self._sd.stop()

    def _load_sounddevice(self) -> Any:
        if self._sd is None:
            import sounddevice as sd  # type: ignore

            self._sd = sd
        return self._sd
