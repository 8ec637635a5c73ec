"""Errors raised while tearing down a live event.

Fatal errors abort the teardown and become the failure outcome. Per-dependent
cleanup failures are not raised; they are recorded on the outcome instead.
"""

from liveops.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class InputValidationError(AppError):
    def __init__(self, errmesg: str):
        super().__init__(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg=errmesg,
            status_code=HttpStatusCode.BAD_REQUEST,
        )


class ChannelNotFoundError(AppError):
    def __init__(self, channel_name: str):
        super().__init__(
            errcode=AppErrorCode.E_CHANNEL_NOT_FOUND,
            errmesg=f"Live event {channel_name} does not exist.",
            status_code=HttpStatusCode.NOT_FOUND,
        )


class ChannelDiscoveryError(AppError):
    def __init__(self, errmesg: str):
        super().__init__(
            errcode=AppErrorCode.E_CHANNEL_DISCOVERY_FAILED,
            errmesg=errmesg,
            status_code=HttpStatusCode.BAD_GATEWAY,
        )


class StateTransitionError(AppError):
    def __init__(
        self,
        errmesg: str,
        errcode: AppErrorCode = AppErrorCode.E_STATE_TRANSITION_FAILED,
        status_code: int = HttpStatusCode.BAD_GATEWAY,
    ):
        super().__init__(errcode=errcode, errmesg=errmesg, status_code=status_code)


class ChannelStopTimeoutError(StateTransitionError):
    def __init__(self, channel_name: str, waited_seconds: float):
        self.waited_seconds = waited_seconds
        super().__init__(
            errmesg=f"Live event {channel_name} still stopping after {waited_seconds:g}s",
            errcode=AppErrorCode.E_CHANNEL_STOP_TIMEOUT,
            status_code=HttpStatusCode.GATEWAY_TIMEOUT,
        )


class ChannelDeletionError(AppError):
    def __init__(self, errmesg: str):
        super().__init__(
            errcode=AppErrorCode.E_CHANNEL_DELETE_FAILED,
            errmesg=errmesg,
            status_code=HttpStatusCode.BAD_GATEWAY,
        )


class OutputDeletionError(AppError):
    def __init__(self, errmesg: str):
        super().__init__(
            errcode=AppErrorCode.E_OUTPUT_DELETE_FAILED,
            errmesg=errmesg,
            status_code=HttpStatusCode.BAD_GATEWAY,
        )
