from __future__ import annotations

import os
import secrets
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from flask import current_app
from werkzeug.datastructures import FileStorage

from .errors import PayloadTooLarge, UnsupportedMediaType


class UploadStore:
    """Local image store for item photos and claim proofs.

    Records point at files only through the generated filename, so every
    delete is driven from the owning record. Deletes are best-effort.
    """

    def __init__(self, root: str, max_bytes: int, allowed_types: Iterable[str]):
        self.root = root
        self.max_bytes = int(max_bytes)
        self.allowed_types = frozenset(allowed_types)

    def path_for(self, filename: str) -> str:
        # Generated names never contain separators; basename guards anything else
        return os.path.join(self.root, os.path.basename(filename))

    @staticmethod
    def url_for(filename: str | None) -> str | None:
        return f"/uploads/{filename}" if filename else None

    def save(self, file: FileStorage | None) -> Optional[str]:
        """Validate and store an uploaded image, returning its generated name.

        Returns None when the form carried no file.
        """
        if file is None or not file.filename:
            return None
        if (file.mimetype or "").lower() not in self.allowed_types:
            raise UnsupportedMediaType()

        # Read at most one byte past the ceiling so oversized bodies never touch disk
        data = file.stream.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise PayloadTooLarge(f"File exceeds {self.max_bytes // (1024 * 1024)} MB limit")

        ext = os.path.splitext(file.filename)[1].lower()[:10]
        fname = secrets.token_hex(16) + ext
        os.makedirs(self.root, exist_ok=True)
        with open(self.path_for(fname), "wb") as f:
            f.write(data)
        current_app.logger.debug("stored upload %s (%d bytes)", fname, len(data))
        return fname

    def delete(self, filename: str | None) -> bool:
        """Remove a stored file. Missing files and OS errors are not fatal."""
        if not filename:
            return False
        try:
            os.remove(self.path_for(filename))
            return True
        except FileNotFoundError:
            return False
        except OSError:
            current_app.logger.warning("could not delete upload %s", filename, exc_info=True)
            return False

    @contextmanager
    def staged(self, file: FileStorage | None) -> Iterator[Optional[str]]:
        """Store ``file`` for the record created inside the block.

        If the block raises, the stored file is removed before the error propagates.
        """
        fname = self.save(file)
        try:
            yield fname
        except Exception:
            if fname:
                self.delete(fname)
            raise


def init_uploads(app) -> UploadStore:
    store = UploadStore(
        root=app.config["UPLOAD_FOLDER"],
        max_bytes=app.config["UPLOAD_MAX_BYTES"],
        allowed_types=app.config["UPLOAD_ALLOWED_TYPES"],
    )
    os.makedirs(store.root, exist_ok=True)
    app.extensions["upload_store"] = store
    return store


def get_upload_store() -> UploadStore:
    return current_app.extensions["upload_store"]
