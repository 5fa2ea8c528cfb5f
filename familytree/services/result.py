# familytree/services/result.py
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from familytree.core.errors import ErrorKind, TreeStoreError

T = TypeVar('T')


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    데이터 접근 연산의 결과.
    - 성공: error 가 None 이고 value 에 결과값이 담깁니다.
    - 실패: error 에 원인이 담기고 value 는 실패 센티넬(None 또는 False)입니다.
    """
    value: T
    error: Optional[TreeStoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    @classmethod
    def success(cls, value: Any) -> "OperationResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TreeStoreError, sentinel: Any = None) -> "OperationResult":
        return cls(value=sentinel, error=error)
