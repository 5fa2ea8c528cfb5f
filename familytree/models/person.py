# familytree/models/person.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any

from firebase_admin import firestore

from familytree.utils.datetime_utils import DateTimeUtils

@dataclass
class Person:
    """
    Firestore 'familyTrees/{treeId}/persons' 서브컬렉션 문서 구조.
    인물은 반드시 하나의 가계도에 속하며, 소속은 서브컬렉션 위치로 결정됩니다.
    """
    family_tree_id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    person_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_firestore(self) -> Dict[str, Any]:
        """신규 문서 저장용 딕셔너리. createdAt/updatedAt 은 서버 시간으로 채워집니다."""
        data = DateTimeUtils.for_firestore(self.fields)
        data['createdAt'] = firestore.SERVER_TIMESTAMP
        data['updatedAt'] = firestore.SERVER_TIMESTAMP
        return data

    @staticmethod
    def update_payload(update_data: Dict[str, Any]) -> Dict[str, Any]:
        """부분 업데이트용 딕셔너리. createdAt 은 건드리지 않고 updatedAt 만 갱신합니다."""
        data = DateTimeUtils.for_firestore(update_data)
        data['updatedAt'] = firestore.SERVER_TIMESTAMP
        return data

    @classmethod
    def from_snapshot(cls, family_tree_id: str, snapshot) -> "Person":
        data = DateTimeUtils.from_firestore(snapshot.to_dict() or {})
        return cls(
            family_tree_id=family_tree_id,
            person_id=snapshot.id,
            created_at=data.pop('createdAt', None),
            updated_at=data.pop('updatedAt', None),
            fields=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.person_id,
            **self.fields,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
