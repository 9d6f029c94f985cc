from .local_image_store import ALLOWED_EXTENSIONS, LocalImageStore, allowed_image

__all__ = ["ALLOWED_EXTENSIONS", "LocalImageStore", "allowed_image"]
