from __future__ import annotations

import posixpath

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from .base import BaseRequirementStorage


class DjangoStorageBackend(BaseRequirementStorage):
    """Storage backend using Django's default file storage.

    Works with any Django storage backend (S3 via django-storages,
    local filesystem, GCS, Azure, etc.)
    """

    def save(self, path: str, content: str) -> str:
        if default_storage.exists(path):
            default_storage.delete(path)

        saved_path = default_storage.save(path, ContentFile(content.encode("utf-8")))
        return default_storage.url(saved_path)

    def url(self, path: str) -> str:
        return default_storage.url(path)

    def exists(self, path: str) -> bool:
        return default_storage.exists(path)

    def delete_folder(self, path: str) -> None:
        try:
            directories, files = default_storage.listdir(path)
        except FileNotFoundError:
            return
        for name in files:
            default_storage.delete(posixpath.join(path, name))
        for name in directories:
            self.delete_folder(posixpath.join(path, name))
