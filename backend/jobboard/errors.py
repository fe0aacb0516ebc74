class JobBoardError(Exception):
    """Base class for domain errors raised by services."""


class NotFoundError(JobBoardError):
    pass


class ForbiddenError(JobBoardError):
    pass


class ConflictError(JobBoardError):
    pass


class DuplicateApplicationError(ConflictError):
    def __init__(self, job_id: str, email: str):
        super().__init__("You have already applied to this job")
        self.job_id = job_id
        self.email = email


class StoreError(JobBoardError):
    """The document store was unreachable or rejected the request."""


class InvalidPageSizeError(ValueError):
    def __init__(self, page_size: int):
        super().__init__(f"page_size must be a positive integer, got {page_size}")
        self.page_size = page_size
