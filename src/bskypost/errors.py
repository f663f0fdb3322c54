from __future__ import annotations


class PostError(Exception):
    """Base class for failures that abort a post composition."""


class InvalidMedia(PostError):
    """An attachment could not be read, typed, or is not an image."""


class UploadFailed(PostError):
    def __init__(self, cause: BaseException, *, mimetype: str | None = None):
        self.cause = cause
        self.mimetype = mimetype
        what = f" ({mimetype})" if mimetype else ""
        super().__init__(f"image upload failed{what}: {cause}")


class RecordInvalid(PostError):
    def __init__(self, details: str):
        self.details = details
        super().__init__(f"post record validation failed: {details}")


class SubmitFailed(PostError):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(str(cause))
