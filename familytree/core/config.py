# familytree/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # 서비스 계정 키 파일 경로. 환경별 클래스에서 덮어씁니다.
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

    # 모바일 앱과 공유하는 Firestore 컬렉션 이름
    FAMILY_TREES_COLLECTION = 'familyTrees'
    PERSONS_SUBCOLLECTION = 'persons'
    USERS_COLLECTION = 'users'

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID', 'familytree-test')

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    FIREBASE_CREDENTIALS_PATH = os.getenv('PROD_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)

# FAMILYTREE_ENV 값('development', 'testing', 'production')에 따라 설정 클래스를 고릅니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)

def get_config(config_name=None):
    """이름(없으면 FAMILYTREE_ENV, 기본값 'development')에 해당하는 설정 클래스를 반환합니다."""
    return config_by_name[config_name or os.getenv('FAMILYTREE_ENV', 'development')]
