"""Client for the remote word-cloud rendering service."""

from __future__ import annotations

import io
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

import httpx
from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, StrictInt, ValidationError

GENERATE_PATH = "/generate_wordcloud"

DEFAULT_WORDS: Dict[str, int] = {
    "Python": 90,
    "Java": 80,
    "C++": 70,
    "JavaScript": 85,
    "HTML": 50,
    "CSS": 55,
    "Ruby": 60,
    "Swift": 65,
    "Kotlin": 75,
}


class WordCloudError(RuntimeError):
    """Base class for word-cloud failures."""


class SerializationError(WordCloudError):
    """Raised when the request body cannot be built."""


class NetworkError(WordCloudError):
    """Raised when the request fails in transport or with an error status."""


class DecodeError(WordCloudError):
    """Raised when the response body is not an image."""


class WordCloudRequest(BaseModel):
    words_with_scores: Dict[str, StrictInt]


@dataclass
class WordCloudResult:
    image: Optional[Image.Image] = None
    error: Optional[WordCloudError] = None

    @property
    def ok(self) -> bool:
        return self.image is not None


ResultCallback = Callable[[WordCloudResult], None]
Dispatcher = Callable[..., object]


class WordCloudClient:
    """Send word scores to the service and decode the image it returns.

    Requests are never retried and cannot be cancelled once issued.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        verify: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._verify = verify
        self._transport = transport

    def build_body(self, words: Mapping[str, int]) -> bytes:
        try:
            payload = WordCloudRequest(words_with_scores=dict(words))
        except (ValidationError, TypeError, ValueError) as exc:
            raise SerializationError(f"Invalid word scores: {exc}") from exc
        return payload.model_dump_json().encode("utf-8")

    def generate(self, words: Mapping[str, int]) -> Image.Image:
        return self._send(self.build_body(words))

    def generate_in_background(
        self,
        words: Mapping[str, int],
        callback: ResultCallback,
        dispatch: Optional[Dispatcher] = None,
    ) -> Optional[threading.Thread]:
        """Issue the request on a worker thread and report back once.

        ``callback`` receives exactly one :class:`WordCloudResult`. When
        ``dispatch`` is given the callback is handed to it instead of being
        called on the worker thread. A body that cannot be serialised aborts
        before anything is sent and the callback is never called.
        """

        try:
            body = self.build_body(words)
        except SerializationError as exc:
            logging.error("Error serializing word cloud request: %s", exc)
            return None

        def worker() -> None:
            try:
                result = WordCloudResult(image=self._send(body))
            except WordCloudError as exc:
                result = WordCloudResult(error=exc)
            except Exception as exc:
                logging.exception("Unexpected error making word cloud request")
                result = WordCloudResult(error=NetworkError(f"Word cloud request failed: {exc}"))
            try:
                if dispatch is not None:
                    dispatch(callback, result)
                else:
                    callback(result)
            except Exception:
                logging.exception("Failed to deliver word cloud result")

        thread = threading.Thread(target=worker, name="wordcloud-request", daemon=True)
        thread.start()
        return thread

    def _send(self, body: bytes) -> Image.Image:
        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            ) as client:
                response = client.post(
                    GENERATE_PATH,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(f"Word cloud request failed: {exc}") from exc
        return decode_image(response.content)


def decode_image(data: bytes) -> Image.Image:
    if not data:
        raise DecodeError("Empty response body.")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"Failed to load image from data: {exc}") from exc
    return img


class WordCloudPanel:
    """Holds the currently displayed word cloud.

    Failed results leave the previous image in place and are only logged.
    """

    def __init__(self) -> None:
        self.image: Optional[Image.Image] = None
        self.last_error: Optional[WordCloudError] = None

    def apply(self, result: WordCloudResult) -> bool:
        if result.image is None:
            self.last_error = result.error
            if isinstance(result.error, DecodeError):
                logging.warning("Failed to load image from data: %s", result.error)
            else:
                logging.warning("Error making API request: %s", result.error)
            return False
        self.image = result.image
        self.last_error = None
        return True
