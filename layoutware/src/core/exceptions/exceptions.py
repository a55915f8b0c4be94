from __future__ import annotations

from enum import Enum

from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR


class AppExceptionCode(Enum):
    """Defines custom App Exception codes for layoutware, associated with HTTP Status codes."""
    INTERNAL_SERVER_ERROR = (HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", "E_003")
    LAYOUT_CONFIGURATION_ERROR = (HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", "E_101")
    LAYOUT_NOT_ATTACHED_ERROR = (HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", "E_102")

    def __init__(self, response_code:int, message:str, error_code:str):
        self._response_code = response_code
        self._message = message
        self._error_code = error_code

    @property
    def response_code(self):
        return self._response_code

    @property
    def message(self):
        return self._message

    @property
    def error_code(self):
        return self._error_code

    def __str__(self):
        return f"response_code={self.response_code}, message={self.message}, error_code={self.error_code}"


class AppException(Exception):
    """Base exception for layoutware"""
    def __init__(self, detail_message:str, app_exception_code:AppExceptionCode = AppExceptionCode.INTERNAL_SERVER_ERROR):
        self._detail_message = detail_message
        self._app_exception_code = app_exception_code
        super().__init__(detail_message)

    @property
    def detail_message(self):
        return self._detail_message

    @property
    def response_code(self):
        return self._app_exception_code.response_code

    @property
    def message(self):
        return self._app_exception_code.message

    @property
    def error_code(self):
        return self._app_exception_code.error_code

    def __str__(self):
        return f"response_code={self.response_code}, message={self.message}, detail_message={self.detail_message}, error_code={self.error_code}"


class LayoutConfigurationException(AppException):
    """Raised when a layout middleware is constructed with an unusable configuration"""
    def __init__(self, detail_message:str):
        super().__init__(detail_message, AppExceptionCode.LAYOUT_CONFIGURATION_ERROR)


class LayoutNotAttachedException(AppException):
    """Raised when a handler requires a layout but no layout middleware attached one"""
    def __init__(self, detail_message:str):
        super().__init__(detail_message, AppExceptionCode.LAYOUT_NOT_ATTACHED_ERROR)
