# familytree/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (설정 클래스보다 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
import firebase_admin
from firebase_admin import credentials

from familytree.core.config import get_config
from familytree.core.errors import (
    ErrorKind,
    TreeStoreError,
    InvalidArgumentError,
    NotFoundError,
    StoreUnavailableError,
)
from familytree.services.result import OperationResult
from familytree.services.tree_service import (
    FamilyTreeService,
    get_tree_service,
    add_person_to_tree,
    get_persons_from_tree,
    get_person,
    update_person,
    delete_person,
    create_family_tree,
    get_family_tree,
    get_user_family_tree,
)

def initialize_firebase(config_name=None):
    """
    기본 Firebase 앱을 한 번만 초기화하고 사용된 설정 클래스를 반환합니다.
    - 환경별 서비스 계정 키 파일 경로가 설정되어 있으면 그 파일이 반드시 존재해야 합니다.
    - 경로가 없으면 Application Default Credentials 를 사용합니다.
    """
    config_name = config_name or os.getenv('FAMILYTREE_ENV', 'development')
    config = get_config(config_name)

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    )

    if firebase_admin._apps:
        return config

    options = {'projectId': config.FIREBASE_PROJECT_ID} if config.FIREBASE_PROJECT_ID else None

    cred_path = config.FIREBASE_CREDENTIALS_PATH
    if cred_path:
        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
    else:
        # 키 파일 경로가 없으면 실행 환경의 기본 사용자 인증 정보(ADC)를 사용합니다.
        cred = credentials.ApplicationDefault()
    firebase_admin.initialize_app(cred, options)

    logging.info(f"Firebase initialized for '{config_name}' environment.")
    return config

__all__ = [
    'initialize_firebase',
    'ErrorKind', 'TreeStoreError', 'InvalidArgumentError', 'NotFoundError', 'StoreUnavailableError',
    'OperationResult', 'FamilyTreeService', 'get_tree_service',
    'add_person_to_tree', 'get_persons_from_tree', 'get_person', 'update_person', 'delete_person',
    'create_family_tree', 'get_family_tree', 'get_user_family_tree',
]
