# catalog/infra/storage/local_image_store.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO

from werkzeug.utils import secure_filename

from catalog.services._shared.ports import ImageStore

log = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp"})
PUBLIC_PREFIX = "/images/"


def allowed_image(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


@dataclass(slots=True)
class LocalImageStore(ImageStore):
    """
    Store cover images on the local filesystem.

    Files are written as ``<directory>/<key>_<secure filename>`` and exposed
    under ``/images/<file>``.
    """

    directory: str

    def save(self, *, key: str, filename: str, stream: BinaryIO) -> str:
        """
        :raises ValueError: On an empty name or a disallowed extension.
        """
        safe = secure_filename(filename or "")
        if not safe or not allowed_image(safe):
            raise ValueError("Unsupported image type; allowed: " + ", ".join(sorted(ALLOWED_EXTENSIONS)))

        os.makedirs(self.directory, exist_ok=True)
        stored = f"{key}_{safe}"
        target = os.path.join(self.directory, stored)
        with open(target, "wb") as fh:
            while True:
                chunk = stream.read(64 * 1024)
                if not chunk:
                    break
                fh.write(chunk)
        log.info("images.saved file=%s", stored)
        return PUBLIC_PREFIX + stored

    def delete(self, public_path: str) -> None:
        name = os.path.basename(public_path or "")
        if not name:
            return
        try:
            os.remove(os.path.join(self.directory, name))
        except FileNotFoundError:
            pass
