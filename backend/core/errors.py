"""Domain errors raised by the upload gateway, the stores and the lifecycle manager.

Routers translate these into HTTP responses; nothing here knows about HTTP.
"""


class AdminError(Exception):
    """Base class for every error raised by the admin core."""


class NotFoundError(AdminError):
    def __init__(self, kind: str, entity_id):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class StoreWriteError(AdminError):
    """The entity store refused an insert or update."""


class DuplicateKeyError(StoreWriteError):
    def __init__(self, kind: str, field: str, value):
        self.kind = kind
        self.field = field
        self.value = value
        super().__init__(f"{kind} with {field} '{value}' already exists")


class InvalidReferenceError(StoreWriteError):
    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"{field} '{value}' does not reference an existing record")


class UploadRejectedError(AdminError):
    """An upload failed validation before anything was written."""


class UnsupportedMediaTypeError(UploadRejectedError):
    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unsupported file type: {content_type or 'unknown'}")


class PayloadTooLargeError(UploadRejectedError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"File too large (max {limit // (1024 * 1024)}MB)")


class ImageInUseError(AdminError):
    """The image address is already owned by another live record.

    Not a StoreWriteError: the blob belongs to that other record and must not
    be discarded when the write is refused.
    """

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"image_url '{address}' is already used by another record")
