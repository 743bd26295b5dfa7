"""Microphone capture into the single recording slot."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np

RECORDING_FILENAME = "recording.wav"


class AudioRecorder:
    """Stream audio from the default microphone into a fixed WAV file.

    Every recording lands in ``<directory>/recording.wav``, so a new recording
    overwrites the previous one.
    """

    def __init__(
        self,
        directory: Path,
        samplerate: int = 12000,
        channels: int = 1,
        sd: Any = None,
    ) -> None:
        self.path = Path(directory) / RECORDING_FILENAME
        self._sd = sd
        self._samplerate = samplerate
        self._channels = channels
        self._stream: Any = None
        self._frames: list[np.ndarray] = []

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    def start(self) -> Optional[Path]:
        """Begin recording and return the locator the audio will be written to.

        Returns ``None`` if the input stream cannot be opened; the recorder is
        left idle in that case.
        """

        if self._stream is not None:
            return self.path

        self._frames = []
        try:
            sd = self._load_sounddevice()
            self._stream = sd.InputStream(
                samplerate=self._samplerate,
                channels=self._channels,
                dtype="float32",
                callback=self._callback,
            )
            self._stream.start()
        except Exception as exc:
            logging.warning("Failed to start recording: %s", exc)
            self._release()
            return None
        return self.path

    def stop(self) -> Optional[Path]:
        if self._stream is None:
            return None

        self._release()
        if not self._frames:
            logging.debug("No audio was captured.")
            return None

        audio = np.concatenate(self._frames, axis=0)
        self._frames = []

        import soundfile as sf

        self.path.parent.mkdir(parents=True, exist_ok=True)
        sf.write(self.path, audio, self._samplerate)
        return self.path

    def _load_sounddevice(self) -> Any:
        if self._sd is None:
            try:
                import sounddevice as sd  # type: ignore
            except Exception as exc:  # pragma: no cover - missing PortAudio
                raise RuntimeError("The `sounddevice` package is required for recording.") from exc
            self._sd = sd
        return self._sd

    def _release(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
            stream.close()
        except Exception as exc:
            logging.debug("Failed to release input stream: %s", exc)

    def _callback(self, indata, frames, time, status) -> None:  # type: ignore[override]
        if status:
            logging.debug("Recorder status: %s", status)
        self._frames.append(indata.copy())
