class ImageStorageError(Exception):
    """Base class for failures raised by the image store."""


class EmptyInputError(ImageStorageError, ValueError):
    def __init__(self) -> None:
        super().__init__("Image payload is empty")


class ImageNotFoundError(ImageStorageError, LookupError):
    def __init__(self, image_id: str, reason: str = "Image not found") -> None:
        self.image_id = image_id
        super().__init__(f"{reason}: {image_id}")


class StorageWriteError(ImageStorageError):
    def __init__(self, image_id: str, reason: str) -> None:
        self.image_id = image_id
        super().__init__(f"Failed to write image {image_id}: {reason}")


class InconsistentStateError(ImageStorageError):
    """A record exists but its payload is missing where the backend keeps it."""

    def __init__(self, image_id: str) -> None:
        self.image_id = image_id
        super().__init__(f"Image record {image_id} has no stored payload")
