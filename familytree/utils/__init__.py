# familytree/utils/__init__.py
"""
유틸리티 모듈 패키지
"""

from .datetime_utils import DateTimeUtils, for_firestore, from_firestore

__all__ = ['DateTimeUtils', 'for_firestore', 'from_firestore']
