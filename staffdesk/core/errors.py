from fastapi import status


class StaffDeskError(Exception):
    """Base error carrying the HTTP status it is reported with."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class NotFoundError(StaffDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class ForbiddenError(StaffDeskError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class ConflictError(StaffDeskError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Conflict"


class PayloadTooLargeError(StaffDeskError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    detail = "File too large"


class StoreError(StaffDeskError):
    """The record store could not complete a call."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class StoreReadError(StoreError):
    detail = "Failed to fetch records"


class StoreWriteError(StoreError):
    detail = "Failed to save changes"
