from enum import Enum


class ErrorCode(Enum):
    # System errors
    BIND_FAILED = "SYS_001"
    UNKNOWN_ERROR = "SYS_999"


class ServerBindError(OSError):
    """리스닝 소켓을 바인딩하지 못했을 때 발생 (재시도 없음)"""

    def __init__(self, host: str, port: int, cause: OSError):
        super().__init__(cause.errno, f"cannot bind {host}:{port}: {cause.strerror or cause}")
        self.host = host
        self.port = port
        self.cause = cause


class ErrorHandler:
    MESSAGES = {
        ErrorCode.BIND_FAILED: "서버 포트를 열 수 없습니다. 이미 사용 중인 포트인지 확인해주세요.",
        ErrorCode.UNKNOWN_ERROR: "파악되지 않는 에러입니다.",
    }

    @staticmethod
    def classify_error(error: Exception) -> ErrorCode:
        if isinstance(error, ServerBindError):
            return ErrorCode.BIND_FAILED
        return ErrorCode.UNKNOWN_ERROR

    @staticmethod
    def format_error_message(error: Exception) -> str:
        """로그/stderr 출력용 메시지"""
        error_code = ErrorHandler.classify_error(error)
        return f"[{error_code.value}] {ErrorHandler.MESSAGES[error_code]} ({error})"
