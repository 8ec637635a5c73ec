"""Application error types shared by domain, services and API layers."""

import inspect
from enum import Enum, IntEnum
from uuid import uuid4


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_CONFIGURATION = "E_CONFIGURATION"
    E_CHANNEL_NOT_FOUND = "E_CHANNEL_NOT_FOUND"
    E_CHANNEL_DISCOVERY_FAILED = "E_CHANNEL_DISCOVERY_FAILED"
    E_DEPENDENT_CLEANUP_FAILED = "E_DEPENDENT_CLEANUP_FAILED"
    E_OUTPUT_DELETE_FAILED = "E_OUTPUT_DELETE_FAILED"
    E_STATE_TRANSITION_FAILED = "E_STATE_TRANSITION_FAILED"
    E_CHANNEL_STOP_TIMEOUT = "E_CHANNEL_STOP_TIMEOUT"
    E_CHANNEL_DELETE_FAILED = "E_CHANNEL_DELETE_FAILED"

    def __str__(self) -> str:
        return self.value


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502
    GATEWAY_TIMEOUT = 504


class AppError(Exception):
    """Error raised by application code and rendered by the API error handler.

    The call site that raised the error is captured so that the handler can log
    where the failure originated rather than where it was caught.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str = AppErrorCode.E_INTERNAL_ERROR,
        errmesg: str = "We are sorry, an error occurred.",
        status_code: int = HttpStatusCode.INTERNAL_SERVER_ERROR,
    ):
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else errcode
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]
        self.caller_info = _caller_info()
        super().__init__(errmesg)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(errcode={self.errcode!r}, errmesg={self.errmesg!r})"


def _caller_info() -> str:
    # Skip frames belonging to AppError constructors (including subclasses).
    for frame_info in inspect.stack()[2:]:
        if frame_info.function != "__init__":
            module = inspect.getmodule(frame_info.frame)
            module_name = module.__name__ if module else frame_info.filename
            return f"{module_name}:{frame_info.function}:{frame_info.lineno}"
    return "unknown"
