# familytree/schemas/tree_schemas.py
from typing import Any, Dict

from marshmallow import Schema, fields, validate, validates_schema, ValidationError, INCLUDE

# 서버가 관리하는 필드. 호출자가 직접 쓰면 createdAt 불변 등의 규칙이 깨집니다.
SERVER_MANAGED_FIELDS = ('id', 'createdAt', 'updatedAt')


def _identifier_field() -> fields.Str:
    """Firestore 문서 ID 로 쓸 수 있는 문자열 (빈 값, 공백, '/' 포함 불가)."""
    return fields.Str(
        required=True,
        validate=[
            validate.Regexp(r'^(?!\s*$)[^/]+$', error="비어 있거나 '/'를 포함한 ID는 사용할 수 없습니다."),
            validate.NoneOf(['.', '..']),
            # Firestore 예약 ID (__.*__)
            validate.Regexp(r'^(?!__.*__$)', error="'__'로 시작하고 끝나는 ID는 Firestore 예약 ID입니다."),
        ],
        error_messages={"required": "필수 ID 값입니다.", "null": "필수 ID 값입니다."}
    )


def load_identifiers(**identifiers: Any) -> Dict[str, str]:
    """
    전달된 ID 인자들을 한 번에 검증합니다.

    :param identifiers: 인자 이름과 값 (예: family_tree_id='abc')
    :return: 검증된 ID 딕셔너리
    :raises ValidationError: 하나라도 비어 있거나 형식이 잘못된 경우
    """
    schema_cls = Schema.from_dict({name: _identifier_field() for name in identifiers})
    return schema_cls().load(identifiers)


class _DocumentDataSchema(Schema):
    """
    호출자가 넘기는 문서 데이터의 공통 검증 스키마.
    - 임의의 필드를 허용합니다 (unknown=INCLUDE).
    - 빈 데이터와 서버 관리 필드는 거부합니다.
    """
    reserved_fields = SERVER_MANAGED_FIELDS

    class Meta:
        unknown = INCLUDE

    @validates_schema
    def validate_document(self, data, **kwargs):
        if not data:
            raise ValidationError("저장할 데이터가 비어 있습니다.")
        reserved = [key for key in data if key in self.reserved_fields]
        if reserved:
            raise ValidationError({key: ["서버에서 관리하는 필드는 직접 지정할 수 없습니다."] for key in reserved})


class PersonDataSchema(_DocumentDataSchema):
    """가계도 인물(Person) 생성 데이터 스키마."""
    firstName = fields.Str(allow_none=True)
    lastName = fields.Str(allow_none=True)
    biography = fields.Str(allow_none=True)
    gender = fields.Str(allow_none=True)
    # birthDate, deathDate 등 날짜 필드는 문자열("1850년경")과 date 값을 모두 허용하므로 선언하지 않습니다.


class PersonUpdateSchema(PersonDataSchema):
    """인물 정보 부분 업데이트(merge) 스키마. 전달된 필드만 갱신됩니다."""


class FamilyTreeDataSchema(_DocumentDataSchema):
    """가계도(FamilyTree) 생성 데이터 스키마. 소유자/멤버 필드는 서버가 채웁니다."""
    reserved_fields = SERVER_MANAGED_FIELDS + ('ownerId', 'memberIds')

    name = fields.Str(allow_none=True, validate=validate.Length(max=100))
    description = fields.Str(allow_none=True)
