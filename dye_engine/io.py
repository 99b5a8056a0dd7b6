"""I/O helpers for PNG images and ZIP archives with ICC-aware sRGB conversion."""

from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, List, Tuple, Union

import numpy as np
from PIL import Image

try:
    from PIL import ImageCms

    _HAS_IMAGECMS = True
except ImportError:
    ImageCms = None
    _HAS_IMAGECMS = False

logger = logging.getLogger(__name__)

SourceType = Union[str, Path, "Image.Image"]
ZipEntry = Tuple[str, bytes]


def _convert_to_srgba(image: Image.Image) -> Image.Image:
    icc_profile = image.info.get("icc_profile")
    if not icc_profile:
        return image.convert("RGBA")

    if not _HAS_IMAGECMS:
        raise RuntimeError(
            "ICC profile present but Pillow ImageCms is unavailable")

    srgb_profile = ImageCms.createProfile("sRGB")
    src_profile = ImageCms.ImageCmsProfile(BytesIO(icc_profile))
    return ImageCms.profileToProfile(image.convert("RGBA"), src_profile,
                                     srgb_profile, outputMode="RGBA")


def load_image_rgba_u8(source: SourceType) -> np.ndarray:
    if not isinstance(source, Image.Image):
        with Image.open(source) as image:
            return load_image_rgba_u8(image)

    image = _convert_to_srgba(source)
    # np.array copies, so the buffer is writable for in-place transforms
    return np.array(image, dtype=np.uint8)


def save_image_rgba_u8(path: Union[str, Path], img_rgba_u8: np.ndarray) -> None:
    image = Image.fromarray(img_rgba_u8)
    image.save(path, format="PNG")


def decode_png_bytes(data: bytes) -> np.ndarray:
    with Image.open(BytesIO(data)) as image:
        return load_image_rgba_u8(image)


def encode_png_bytes(img_rgba_u8: np.ndarray) -> bytes:
    buffer = BytesIO()
    save_image_rgba_u8(buffer, img_rgba_u8)
    return buffer.getvalue()


def read_zip_entries(path: Union[str, Path]) -> List[ZipEntry]:
    """Read every file member of a ZIP archive, in archive order.

    Directory entries are skipped.
    """

    entries: List[ZipEntry] = []
    with zipfile.ZipFile(path) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            entries.append((info.filename, archive.read(info)))
    logger.debug("Read %d entries from %s", len(entries), path)
    return entries


def write_zip(path: Union[str, Path, BinaryIO], entries: List[ZipEntry]) -> None:
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries:
            archive.writestr(name, data)


def is_png_name(name: str) -> bool:
    return name.lower().endswith(".png")
