"""
비밀번호 해시 (Argon2)
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """평문 비밀번호를 Argon2 해시로 변환"""
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """비밀번호 일치 여부

    해시 형식이 잘못된 경우도 불일치로 취급
    """
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHash):
        return False
