from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from reportlab.lib.utils import ImageReader

from billing.core.errors import ResourceLoadError
from billing.core.paths import resource_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Logo:
    image: ImageReader
    width: int
    height: int


def decode_logo(path: Union[str, Path]) -> Logo:
    """Read and fully decode an image file. Raises ResourceLoadError on any failure."""
    p = Path(path)
    if not p.is_absolute() and not p.exists():
        p = resource_path(p)
    try:
        data = p.read_bytes()
    except OSError as exc:
        raise ResourceLoadError(f"cannot read logo {p}: {exc}") from exc
    try:
        reader = ImageReader(io.BytesIO(data))
        width, height = reader.getSize()
        # Force a full decode so truncated files fail here, not mid-render
        reader.getRGBData()
    except Exception as exc:
        raise ResourceLoadError(f"cannot decode logo {p}: {exc}") from exc
    if width <= 0 or height <= 0:
        raise ResourceLoadError(f"logo {p} has no pixels")
    return Logo(image=reader, width=int(width), height=int(height))


def load_logo(path: Optional[Union[str, Path]]) -> Optional[Logo]:
    """Logo for the header, or None when it is not configured or cannot be used."""
    if not path:
        return None
    try:
        return decode_logo(path)
    except ResourceLoadError as exc:
        logger.warning("Logo unavailable, using text fallback: %s", exc)
        return None
