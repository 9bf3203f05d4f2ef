import logging

from rest_framework import status
from rest_framework.exceptions import APIException

log = logging.getLogger(__name__)


class DomainError(APIException):
    """
    도메인 규칙 위반의 공통 부모.
    - 서비스 계층에서 raise 하면 DRF가 그대로 HTTP 응답으로 변환한다.
    - extra 로 넘긴 키는 응답 본문에 detail/code 와 함께 실린다.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request violates a domain rule."
    default_code = "domain_error"

    def __init__(self, detail=None, code=None, **extra):
        super().__init__(detail=detail, code=code)
        self.extra = extra


class InvalidState(DomainError):
    default_detail = "Operation is not allowed in the current state."
    default_code = "invalid_state"


class MissingDocuments(DomainError):
    default_detail = "All verification documents are required (NID front, NID back, and selfie)."
    default_code = "missing_documents"


class MissingReason(DomainError):
    default_detail = "A reason is required."
    default_code = "missing_reason"


class InvalidTarget(DomainError):
    default_detail = "Must specify either a user or a post to report, not both."
    default_code = "invalid_target"


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"


class VerificationRequired(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Account verification required to access this feature."
    default_code = "verification_required"


class AccountSuspended(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Your account has been suspended."
    default_code = "account_suspended"


def domain_exception_handler(exc, context):
    # rest_framework.views 는 인증 클래스(users.authentication -> 이 모듈)를 불러오므로 호출 시점에 import
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)
    if response is None or not isinstance(exc, DomainError):
        return response

    # detail 은 항상 단일 문자열(ErrorDetail)로 만든다
    code = getattr(exc.detail, "code", None) or exc.default_code
    response.data = {"detail": str(exc.detail), "code": code, **exc.extra}
    log.info("domain error %s (%s): %s", code, response.status_code, exc.detail)
    return response
