from abc import ABC, abstractmethod

from mediastore.models.upload import IncomingFile, StorageMode, UploadDescriptor


class StorageBackend(ABC):
    mode: StorageMode

    @abstractmethod
    def store(self, file: IncomingFile) -> UploadDescriptor:
        """Persist an already validated file and describe where it went."""
        ...
