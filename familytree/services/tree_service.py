# familytree/services/tree_service.py
import logging
from typing import Any, Dict, List, Optional

from firebase_admin import firestore
from marshmallow import ValidationError

from familytree.core.config import get_config
from familytree.core.errors import InvalidArgumentError, NotFoundError, classify_store_error
from familytree.models.family_tree import FamilyTree
from familytree.models.person import Person
from familytree.schemas.tree_schemas import (
    FamilyTreeDataSchema,
    PersonDataSchema,
    PersonUpdateSchema,
    load_identifiers,
)
from familytree.services.result import OperationResult

logger = logging.getLogger(__name__)


class FamilyTreeService:
    """
    가계도(familyTrees)와 인물(persons) 문서에 대한 데이터 접근 서비스.
    - 모든 연산은 인자를 먼저 검증한 뒤 Firestore 를 호출합니다. 검증 실패 시 Firestore 는 호출되지 않습니다.
    - 예외를 밖으로 던지지 않고 OperationResult 로 성공/실패와 오류 종류를 돌려줍니다.
    """
    def __init__(self, db=None, config=None):
        config = config or get_config()
        self.db = db if db is not None else firestore.client()
        self.trees_ref = self.db.collection(config.FAMILY_TREES_COLLECTION)
        self.users_ref = self.db.collection(config.USERS_COLLECTION)
        self.persons_collection_name = config.PERSONS_SUBCOLLECTION

    def _persons_ref(self, family_tree_id: str):
        return self.trees_ref.document(family_tree_id).collection(self.persons_collection_name)

    def _invalid(self, operation: str, err: ValidationError, sentinel: Any) -> OperationResult:
        logger.warning(f"{operation} 인자 검증 실패: {err.messages}")
        return OperationResult.failure(InvalidArgumentError(str(err.messages)), sentinel)

    def _store_failure(self, operation: str, exc: Exception, sentinel: Any, **context) -> OperationResult:
        error = classify_store_error(exc)
        if isinstance(error, NotFoundError):
            logger.warning(f"{operation} 대상 문서 없음 ({context}): {exc}")
        else:
            logger.error(f"{operation} Firestore 오류 ({context}): {exc}", exc_info=True)
        return OperationResult.failure(error, sentinel)

    # ------------------------------------------------------------------
    # 인물(Person)
    # ------------------------------------------------------------------
    def add_person_to_tree(self, person_data: Dict[str, Any], family_tree_id: str) -> OperationResult:
        """가계도의 persons 서브컬렉션에 새 인물을 추가하고 생성된 문서 ID를 반환합니다."""
        try:
            load_identifiers(family_tree_id=family_tree_id)
            data = PersonDataSchema().load(person_data)
        except ValidationError as err:
            return self._invalid("add_person_to_tree", err, None)

        try:
            person = Person(family_tree_id=family_tree_id, fields=data)
            _, doc_ref = self._persons_ref(family_tree_id).add(person.to_firestore())
            logger.info(f"Person added (tree: {family_tree_id}, person: {doc_ref.id})")
            return OperationResult.success(doc_ref.id)
        except Exception as e:
            return self._store_failure("add_person_to_tree", e, None, family_tree_id=family_tree_id)

    def get_persons_from_tree(self, family_tree_id: str) -> OperationResult:
        """가계도의 모든 인물을 최신 생성순(createdAt 내림차순)으로 조회합니다."""
        try:
            load_identifiers(family_tree_id=family_tree_id)
        except ValidationError as err:
            return self._invalid("get_persons_from_tree", err, None)

        try:
            query = self._persons_ref(family_tree_id).order_by('createdAt', direction=firestore.Query.DESCENDING)
            persons = [Person.from_snapshot(family_tree_id, doc).to_dict() for doc in query.stream()]
            logger.info(f"Fetched {len(persons)} persons (tree: {family_tree_id})")
            return OperationResult.success(persons)
        except Exception as e:
            return self._store_failure("get_persons_from_tree", e, None, family_tree_id=family_tree_id)

    def get_person(self, family_tree_id: str, person_id: str) -> OperationResult:
        """인물 한 명을 조회합니다. 문서가 없으면 NOT_FOUND 입니다."""
        try:
            load_identifiers(family_tree_id=family_tree_id, person_id=person_id)
        except ValidationError as err:
            return self._invalid("get_person", err, None)

        try:
            snapshot = self._persons_ref(family_tree_id).document(person_id).get()
            if not snapshot.exists:
                raise NotFoundError(f"인물을 찾을 수 없습니다: {family_tree_id}/{person_id}")
            return OperationResult.success(Person.from_snapshot(family_tree_id, snapshot).to_dict())
        except Exception as e:
            return self._store_failure("get_person", e, None, family_tree_id=family_tree_id, person_id=person_id)

    def update_person(self, family_tree_id: str, person_id: str, update_data: Dict[str, Any]) -> OperationResult:
        """
        인물 문서에 update_data 를 병합(merge)합니다.
        전달되지 않은 필드와 createdAt 은 그대로 유지되고 updatedAt 만 서버 시간으로 갱신됩니다.
        """
        try:
            load_identifiers(family_tree_id=family_tree_id, person_id=person_id)
            data = PersonUpdateSchema().load(update_data)
        except ValidationError as err:
            return self._invalid("update_person", err, False)

        try:
            self._persons_ref(family_tree_id).document(person_id).update(Person.update_payload(data))
            logger.info(f"Person updated (tree: {family_tree_id}, person: {person_id}) fields: {list(data.keys())}")
            return OperationResult.success(True)
        except Exception as e:
            return self._store_failure("update_person", e, False, family_tree_id=family_tree_id, person_id=person_id)

    def delete_person(self, family_tree_id: str, person_id: str) -> OperationResult:
        """인물 문서를 삭제합니다. 존재하지 않는 문서의 삭제도 성공으로 처리됩니다 (Firestore 동작)."""
        try:
            load_identifiers(family_tree_id=family_tree_id, person_id=person_id)
        except ValidationError as err:
            return self._invalid("delete_person", err, False)

        try:
            self._persons_ref(family_tree_id).document(person_id).delete()
            logger.info(f"Person deleted (tree: {family_tree_id}, person: {person_id})")
            return OperationResult.success(True)
        except Exception as e:
            return self._store_failure("delete_person", e, False, family_tree_id=family_tree_id, person_id=person_id)

    # ------------------------------------------------------------------
    # 가계도(FamilyTree)
    # ------------------------------------------------------------------
    def create_family_tree(self, tree_data: Dict[str, Any], user_id: str) -> OperationResult:
        """
        [배치] 가계도 문서 생성과 사용자 문서의 familyTreeId 갱신을 원자적으로 처리합니다.
        - 가계도: ownerId = user_id, memberIds = [user_id], createdAt/updatedAt = 서버 시간
        - 사용자: familyTreeId = 새 가계도 ID, updatedAt = 서버 시간
        사용자 문서 갱신이 실패하면 가계도 문서도 저장되지 않습니다.
        """
        try:
            load_identifiers(user_id=user_id)
            data = FamilyTreeDataSchema().load(tree_data)
        except ValidationError as err:
            return self._invalid("create_family_tree", err, None)

        try:
            tree = FamilyTree.new(owner_id=user_id, tree_data=data)
            tree_ref = self.trees_ref.document()
            user_ref = self.users_ref.document(user_id)

            batch = self.db.batch()
            batch.set(tree_ref, tree.to_firestore())
            batch.update(user_ref, {
                'familyTreeId': tree_ref.id,
                'updatedAt': firestore.SERVER_TIMESTAMP,
            })
            batch.commit()

            logger.info(f"Family tree created (tree: {tree_ref.id}, owner: {user_id})")
            return OperationResult.success(tree_ref.id)
        except Exception as e:
            return self._store_failure("create_family_tree", e, None, user_id=user_id)

    def get_family_tree(self, family_tree_id: str) -> OperationResult:
        """가계도 문서를 조회합니다. 문서가 없으면 NOT_FOUND 입니다."""
        try:
            load_identifiers(family_tree_id=family_tree_id)
        except ValidationError as err:
            return self._invalid("get_family_tree", err, None)

        try:
            return OperationResult.success(self._fetch_tree(family_tree_id))
        except Exception as e:
            return self._store_failure("get_family_tree", e, None, family_tree_id=family_tree_id)

    def get_user_family_tree(self, user_id: str) -> OperationResult:
        """사용자 문서의 familyTreeId 를 따라가 소속 가계도를 조회합니다."""
        try:
            load_identifiers(user_id=user_id)
        except ValidationError as err:
            return self._invalid("get_user_family_tree", err, None)

        try:
            user_doc = self.users_ref.document(user_id).get()
            if not user_doc.exists:
                raise NotFoundError(f"사용자를 찾을 수 없습니다: {user_id}")
            family_tree_id = (user_doc.to_dict() or {}).get('familyTreeId')
            if not family_tree_id:
                raise NotFoundError(f"사용자에게 연결된 가계도가 없습니다: {user_id}")
            return OperationResult.success(self._fetch_tree(family_tree_id))
        except Exception as e:
            return self._store_failure("get_user_family_tree", e, None, user_id=user_id)

    def _fetch_tree(self, family_tree_id: str) -> Dict[str, Any]:
        snapshot = self.trees_ref.document(family_tree_id).get()
        if not snapshot.exists:
            raise NotFoundError(f"가계도를 찾을 수 없습니다: {family_tree_id}")
        return FamilyTree.from_snapshot(snapshot).to_dict()


# =====================================================================================
# 모듈 수준 함수: 실패 시 센티넬(None / False)만 돌려주는 단순 인터페이스
# =====================================================================================
_default_service: Optional[FamilyTreeService] = None

def get_tree_service() -> FamilyTreeService:
    """기본 Firebase 앱의 Firestore 클라이언트를 쓰는 공용 서비스 인스턴스를 반환합니다."""
    global _default_service
    if _default_service is None:
        _default_service = FamilyTreeService()
    return _default_service

def _resolve_service(operation: str) -> Optional[FamilyTreeService]:
    try:
        return get_tree_service()
    except Exception as e:
        logger.error(f"{operation} 실패: Firestore 클라이언트를 초기화할 수 없습니다: {e}", exc_info=True)
        return None

def add_person_to_tree(person_data: Dict[str, Any], family_tree_id: str) -> Optional[str]:
    service = _resolve_service("add_person_to_tree")
    return service.add_person_to_tree(person_data, family_tree_id).value if service else None

def get_persons_from_tree(family_tree_id: str) -> Optional[List[Dict[str, Any]]]:
    service = _resolve_service("get_persons_from_tree")
    return service.get_persons_from_tree(family_tree_id).value if service else None

def get_person(family_tree_id: str, person_id: str) -> Optional[Dict[str, Any]]:
    service = _resolve_service("get_person")
    return service.get_person(family_tree_id, person_id).value if service else None

def update_person(family_tree_id: str, person_id: str, update_data: Dict[str, Any]) -> bool:
    service = _resolve_service("update_person")
    return service.update_person(family_tree_id, person_id, update_data).value if service else False

def delete_person(family_tree_id: str, person_id: str) -> bool:
    service = _resolve_service("delete_person")
    return service.delete_person(family_tree_id, person_id).value if service else False

def create_family_tree(tree_data: Dict[str, Any], user_id: str) -> Optional[str]:
    service = _resolve_service("create_family_tree")
    return service.create_family_tree(tree_data, user_id).value if service else None

def get_family_tree(family_tree_id: str) -> Optional[Dict[str, Any]]:
    service = _resolve_service("get_family_tree")
    return service.get_family_tree(family_tree_id).value if service else None

def get_user_family_tree(user_id: str) -> Optional[Dict[str, Any]]:
    service = _resolve_service("get_user_family_tree")
    return service.get_user_family_tree(user_id).value if service else None
