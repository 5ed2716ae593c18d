"""Remote store and file storage backends."""
from .base import Embed, Order, RemoteStore, Select
from .local import LocalStore
from .rest import RestStore
from .storage import FileStorage, LocalFileStorage, StorageApiFileStorage, attachment_path

__all__ = [
    "Embed",
    "Order",
    "RemoteStore",
    "Select",
    "LocalStore",
    "RestStore",
    "FileStorage",
    "LocalFileStorage",
    "StorageApiFileStorage",
    "attachment_path",
]
