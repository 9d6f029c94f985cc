from __future__ import annotations

from typing import BinaryIO, Protocol


class ImageStore(Protocol):
    """Port for persisting cover images and naming their public path."""

    def save(self, *, key: str, filename: str, stream: BinaryIO) -> str:
        """
        Persist ``stream`` and return its public path (``/images/<file>``).

        :param key: Stable prefix making the stored name unique (book id).
        :param filename: Client-supplied file name.
        :param stream: Binary content.
        """
        ...

    def delete(self, public_path: str) -> None:
        """Remove a previously stored image; missing files are ignored."""
        ...
