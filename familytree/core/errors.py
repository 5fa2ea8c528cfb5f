# familytree/core/errors.py
from enum import Enum

from google.api_core import exceptions as gcp_exceptions


class ErrorKind(Enum):
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class TreeStoreError(Exception):
    """가계도 데이터 접근 계층에서 발생하는 모든 오류의 기반 클래스."""
    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r})"


class InvalidArgumentError(TreeStoreError):
    """필수 인자가 없거나 형식이 잘못된 경우."""
    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(TreeStoreError):
    """대상 문서가 존재하지 않는 경우."""
    kind = ErrorKind.NOT_FOUND


class StoreUnavailableError(TreeStoreError):
    """네트워크, 권한 등 Firestore 호출 자체가 실패한 경우."""
    kind = ErrorKind.STORE_UNAVAILABLE


def classify_store_error(exc: Exception) -> TreeStoreError:
    """Firestore 클라이언트 예외를 TreeStoreError 로 변환합니다."""
    if isinstance(exc, TreeStoreError):
        return exc
    if isinstance(exc, gcp_exceptions.NotFound):
        return NotFoundError(str(exc))
    if isinstance(exc, gcp_exceptions.InvalidArgument):
        # 문서 ID, 필드 값 등 요청 자체를 Firestore 가 거부한 경우
        return InvalidArgumentError(str(exc))
    return StoreUnavailableError(str(exc))
