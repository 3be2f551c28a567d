# src/otpmigrate/migration/scanner.py

import logging
from pathlib import Path
from typing import Set

from PIL import Image
from pyzbar.pyzbar import decode

from .importer import MIGRATION_SCHEME
from .uri import OTPAUTH_SCHEME

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".bmp", ".webp"}


def extract_uris_from_path(path_str: str) -> Set[str]:
    """
    Scan an image, or every image directly inside a directory, for QR codes
    holding migration or otpauth:// URIs.
    """
    found_uris = set()
    path = Path(path_str)

    if not path.exists():
        return found_uris

    files = [path] if path.is_file() else sorted(path.iterdir())

    for f in files:
        if f.suffix.lower() not in IMAGE_SUFFIXES:
            continue
        try:
            with Image.open(f) as img:
                # Greyscale gives pyzbar a cleaner contrast to work with
                decoded = decode(img.convert("L"))
        except OSError as e:
            logger.warning("Could not read %s: %s", f, e)
            continue

        for obj in decoded:
            try:
                content = obj.data.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("Ignoring non UTF-8 QR code in %s", f)
                continue
            if content.startswith((MIGRATION_SCHEME, OTPAUTH_SCHEME)):
                found_uris.add(content)

    logger.debug("Found %d URI(s) in %s", len(found_uris), path)
    return found_uris
