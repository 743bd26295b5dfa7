"""Image selection for entries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError


def pick_image(path: Union[str, Path, None]) -> Optional[str]:
    """Return a locator for ``path`` if it points at a readable image.

    Choosing nothing is a valid outcome, so every failure yields ``None``.
    """

    if not path:
        return None
    candidate = Path(path).expanduser()
    if not candidate.is_file():
        logging.warning("Image %s does not exist.", candidate)
        return None
    try:
        with Image.open(candidate) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        logging.warning("Failed to read image %s: %s", candidate, exc)
        return None
    return str(candidate.resolve())
