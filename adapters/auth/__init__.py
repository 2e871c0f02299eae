"""
인증 어댑터

JWT bearer 토큰 발급/검증 및 비밀번호 해시.
"""

from adapters.auth.identity import JwtIdentityProvider
from adapters.auth.passwords import hash_password, verify_password

__all__ = [
    "JwtIdentityProvider",
    "hash_password",
    "verify_password",
]
