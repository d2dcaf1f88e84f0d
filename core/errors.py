from fastapi import HTTPException


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(status_code=401, detail=detail)


class InvalidCredentials(HTTPException):
    def __init__(self):
        super().__init__(status_code=401, detail="Invalid credentials")


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=403, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class SlotUnavailable(HTTPException):
    def __init__(self):
        super().__init__(status_code=400, detail="Time slot not available")


class HasFutureAppointments(HTTPException):
    def __init__(self):
        super().__init__(status_code=400, detail="Cannot delete doctor with future appointments")


class InvalidStatusTransition(HTTPException):
    def __init__(self, current: str, new: str):
        super().__init__(
            status_code=400,
            detail=f"Invalid status transition: {current} -> {new}",
        )


class DuplicateEmail(HTTPException):
    def __init__(self):
        super().__init__(status_code=409, detail="Email already registered")


class InternalError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=500, detail=detail)
