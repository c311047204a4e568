class CustomBaseError(Exception):
    """Business rejection; @Logger.io logs these without a traceback"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    """Invalid input or a broken business rule"""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    """The entity is in a state that forbids the operation (paid purchase, picked up item)"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)
