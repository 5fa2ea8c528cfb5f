# conftest.py
"""
pytest 공용 픽스처

Firestore 클라이언트를 흉내내는 인메모리 대역(FakeFirestore)을 제공합니다.
- 컬렉션/문서/서브컬렉션 경로, add, order_by, stream, batch 를 지원합니다.
- SERVER_TIMESTAMP 센티넬은 쓰기마다 1초씩 증가하는 가짜 서버 시계 값으로 바뀝니다.
- fail_on 에 연산 이름('get', 'set', 'update', 'delete', 'commit')과 예외를 넣으면 해당 호출에서 예외가 발생합니다.
- reads / writes 카운터로 Firestore 호출 여부를 확인할 수 있습니다.
"""

import copy
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions

from familytree.services import tree_service as tree_service_module
from familytree.services.tree_service import FamilyTreeService


class FakeServerClock:
    def __init__(self):
        self.current = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def tick(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, db, path):
        self._db = db
        self.path = path
        self.id = path.rsplit('/', 1)[-1]

    def collection(self, name):
        return FakeCollectionReference(self._db, f"{self.path}/{name}")

    def get(self):
        self._db._call('get')
        self._db.reads += 1
        return FakeSnapshot(self, copy.deepcopy(self._db.documents.get(self.path)))

    def set(self, document_data, merge=False):
        self._db._call('set')
        self._db._apply_set(self.path, document_data)

    def update(self, field_updates):
        self._db._call('update')
        self._db._ensure_exists(self.path)
        self._db._apply_update(self.path, field_updates)

    def delete(self):
        self._db._call('delete')
        self._db.writes += 1
        self._db.documents.pop(self.path, None)


class FakeQuery:
    def __init__(self, collection, orders=()):
        self._collection = collection
        self._orders = list(orders)

    def order_by(self, field_path, direction=firestore.Query.ASCENDING):
        return FakeQuery(self._collection, self._orders + [(field_path, direction)])

    def stream(self):
        db = self._collection._db
        db._call('get')
        db.reads += 1
        prefix = self._collection.path + '/'
        docs = [
            (path, data) for path, data in db.documents.items()
            if path.startswith(prefix) and '/' not in path[len(prefix):]
        ]
        for field_path, direction in reversed(self._orders):
            # Firestore 처럼 정렬 필드가 없는 문서는 결과에서 제외합니다.
            docs = [(path, data) for path, data in docs if field_path in data]
            docs.sort(key=lambda item: item[1][field_path],
                      reverse=direction == firestore.Query.DESCENDING)
        for path, data in docs:
            yield FakeSnapshot(FakeDocumentReference(db, path), copy.deepcopy(data))


class FakeCollectionReference(FakeQuery):
    def __init__(self, db, path):
        self._db = db
        self.path = path
        super().__init__(self)

    @property
    def id(self):
        return self.path.rsplit('/', 1)[-1]

    def document(self, document_id=None):
        document_id = document_id or uuid.uuid4().hex[:20]
        return FakeDocumentReference(self._db, f"{self.path}/{document_id}")

    def add(self, document_data, document_id=None):
        doc_ref = self.document(document_id)
        doc_ref.set(document_data)
        return self._db.clock.current, doc_ref


class FakeWriteBatch:
    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, reference, document_data, merge=False):
        self._ops.append(('set', reference.path, document_data))

    def update(self, reference, field_updates):
        self._ops.append(('update', reference.path, field_updates))

    def commit(self):
        self._db._call('commit')
        # 하나라도 실패하면 아무것도 반영하지 않습니다.
        for op, path, _ in self._ops:
            if op == 'update':
                self._db._ensure_exists(path)
        for op, path, data in self._ops:
            if op == 'set':
                self._db._apply_set(path, data)
            else:
                self._db._apply_update(path, data)


class FakeFirestore:
    def __init__(self):
        self.documents = {}
        self.clock = FakeServerClock()
        self.fail_on = {}
        self.reads = 0
        self.writes = 0

    def collection(self, name):
        return FakeCollectionReference(self, name)

    def batch(self):
        return FakeWriteBatch(self)

    def _call(self, operation):
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def _ensure_exists(self, path):
        if path not in self.documents:
            raise gcp_exceptions.NotFound(f"No document to update: {path}")

    def _resolve(self, data):
        server_time = self.clock.tick()
        return {
            key: (server_time if value is firestore.SERVER_TIMESTAMP else copy.deepcopy(value))
            for key, value in data.items()
        }

    def _apply_set(self, path, data):
        self.writes += 1
        self.documents[path] = self._resolve(data)

    def _apply_update(self, path, data):
        self.writes += 1
        self.documents[path].update(self._resolve(data))

    # 테스트 편의 메서드
    def seed(self, path, data):
        self.documents[path] = copy.deepcopy(data)

    def data(self, path):
        return copy.deepcopy(self.documents.get(path))


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def service(fake_db):
    return FamilyTreeService(db=fake_db)


@pytest.fixture
def default_service(monkeypatch, service):
    """모듈 수준 함수들이 가짜 Firestore 를 쓰도록 공용 서비스 인스턴스를 교체합니다."""
    monkeypatch.setattr(tree_service_module, '_default_service', service)
    return service
