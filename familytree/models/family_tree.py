# familytree/models/family_tree.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from firebase_admin import firestore

from familytree.utils.datetime_utils import DateTimeUtils

@dataclass
class FamilyTree:
    """
    Firestore 'familyTrees' 컬렉션 문서 구조.
    소유자/멤버/타임스탬프 외의 설명 필드(name, description 등)는 fields 에 그대로 보관합니다.
    문서 필드명은 모바일 앱과 공유하므로 camelCase 를 유지합니다.
    """
    owner_id: str
    member_ids: List[str] = field(default_factory=list)
    fields: Dict[str, Any] = field(default_factory=dict)
    tree_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(cls, owner_id: str, tree_data: Dict[str, Any]) -> "FamilyTree":
        """생성자를 유일한 초기 멤버로 갖는 새 가계도를 만듭니다."""
        return cls(owner_id=owner_id, member_ids=[owner_id], fields=dict(tree_data))

    def to_firestore(self) -> Dict[str, Any]:
        """신규 문서 저장용 딕셔너리. 타임스탬프는 서버 시간으로 채워집니다."""
        data = DateTimeUtils.for_firestore(self.fields)
        data.update({
            'ownerId': self.owner_id,
            'memberIds': list(self.member_ids),
            'createdAt': firestore.SERVER_TIMESTAMP,
            'updatedAt': firestore.SERVER_TIMESTAMP,
        })
        return data

    @classmethod
    def from_snapshot(cls, snapshot) -> "FamilyTree":
        """Firestore DocumentSnapshot 으로부터 FamilyTree 인스턴스를 생성합니다."""
        data = DateTimeUtils.from_firestore(snapshot.to_dict() or {})
        return cls(
            tree_id=snapshot.id,
            owner_id=data.pop('ownerId', None),
            member_ids=data.pop('memberIds', None) or [],
            created_at=data.pop('createdAt', None),
            updated_at=data.pop('updatedAt', None),
            fields=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        """호출자에게 돌려줄 평탄화된 딕셔너리 (문서 ID 포함)."""
        return {
            'id': self.tree_id,
            **self.fields,
            'ownerId': self.owner_id,
            'memberIds': list(self.member_ids),
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
