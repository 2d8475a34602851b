# -*- coding: utf-8 -*-
"""Meals — photo compression before upload."""

from __future__ import annotations

import base64
import io
import logging
from typing import Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import settings
from .errors import ImageProcessingFailed, ImageTooLarge

log = logging.getLogger(__name__)

START_QUALITY = 80
QUALITY_STEP = 10
MIN_QUALITY = 10


def _open(image: Union[Image.Image, bytes]) -> Image.Image:
    if isinstance(image, Image.Image):
        return image
    try:
        img = Image.open(io.BytesIO(image))
        img.load()
    except Image.DecompressionBombError as exc:
        raise ImageTooLarge(str(exc)) from exc
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageProcessingFailed(str(exc)) from exc
    return ImageOps.exif_transpose(img) or img


def _to_jpeg(img: Image.Image, quality: int) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def compress_image(image: Union[Image.Image, bytes], *, max_bytes: Optional[int] = None) -> bytes:
    """Re-encode as JPEG at decreasing quality until it fits ``max_bytes``.

    Starts at quality 80 and steps down by 10 while the payload is over the cap.
    Raises ImageTooLarge when quality 10 is still over the cap.
    """
    cap = settings.max_image_bytes if max_bytes is None else max_bytes
    img = _open(image)
    try:
        if img.mode != "RGB":
            img = img.convert("RGB")
        quality = START_QUALITY
        data = _to_jpeg(img, quality)
        while len(data) > cap and quality > MIN_QUALITY:
            quality -= QUALITY_STEP
            data = _to_jpeg(img, quality)
    except (OSError, ValueError) as exc:
        raise ImageProcessingFailed(str(exc)) from exc

    if len(data) > cap:
        raise ImageTooLarge(f"{len(data)} bytes > {cap}")
    log.debug("meal photo encoded: %d bytes at quality %d", len(data), quality)
    return data


def encode_image(image: Union[Image.Image, bytes], *, max_bytes: Optional[int] = None) -> str:
    return base64.b64encode(compress_image(image, max_bytes=max_bytes)).decode("ascii")
