from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """요청 처리 실패 유형 (응답 JSON의 kind 값)"""
    INVALID_INPUT = "invalid_input"
    DOMAIN_MISMATCH = "domain_mismatch"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    UPSTREAM_REJECTED = "upstream_rejected"
    UNPARSEABLE_CONTENT = "unparseable_content"
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"


class PangError(Exception):
    """
    추출/검색 파이프라인의 공통 예외.
    kind 와 status_code 로 HTTP 경계에서 그대로 응답을 만든다.
    """
    kind = ErrorKind.INTERNAL_ERROR
    status_code = 500
    default_message = "요청을 처리하는 중 오류가 발생했습니다"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind.value}


class InvalidInputError(PangError):
    kind = ErrorKind.INVALID_INPUT
    status_code = 400
    default_message = "요청 파라미터가 올바르지 않습니다"

    @classmethod
    def from_validation(cls, error) -> "InvalidInputError":
        """pydantic ValidationError 의 첫 번째 메시지로 만든다"""
        details = error.errors()
        if not details:
            return cls()
        first = details[0]
        field = ".".join(str(loc) for loc in first.get("loc", ()))
        message = str(first.get("msg", "")).replace("Value error, ", "")
        return cls(f"{field}: {message}" if field else message)


class DomainMismatchError(PangError):
    kind = ErrorKind.DOMAIN_MISMATCH
    status_code = 400
    default_message = "쿠팡 URL만 지원합니다"


class UpstreamUnreachableError(PangError):
    """페이지/검색 API 연결 실패 또는 타임아웃. 사용자가 다시 시도하면 된다."""
    kind = ErrorKind.UPSTREAM_UNREACHABLE
    status_code = 502
    default_message = "외부 서버에 연결할 수 없습니다. 잠시 후 다시 시도해주세요"


class UpstreamRejectedError(PangError):
    """페이지/검색 API가 2xx가 아닌 응답을 돌려준 경우"""
    kind = ErrorKind.UPSTREAM_REJECTED
    status_code = 502
    default_message = "외부 서버가 요청을 거부했습니다"

    def __init__(self, message: str = "", upstream_status: Optional[int] = None, unauthorized: bool = False):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.unauthorized = unauthorized
        if unauthorized:
            self.status_code = 401

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.upstream_status is not None:
            body["status"] = self.upstream_status
        return body


class UnparseableContentError(PangError):
    kind = ErrorKind.UNPARSEABLE_CONTENT
    status_code = 422
    default_message = "상품 정보를 파싱할 수 없습니다. URL을 확인해주세요."


class ConfigurationError(PangError):
    kind = ErrorKind.CONFIGURATION_ERROR
    status_code = 500
    default_message = "서버 설정이 올바르지 않습니다"


class InternalError(PangError):
    kind = ErrorKind.INTERNAL_ERROR
    status_code = 500
