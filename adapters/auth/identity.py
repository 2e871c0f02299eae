"""
JWT Identity Provider

로그인 시 HS256 bearer 토큰을 발급하고
요청마다 토큰을 검증하여 Identity 를 복원한다.
"""

import logging
from datetime import timedelta

import jwt

from core.constants import Defaults
from core.errors import InvalidCredentials
from core.types import Identity
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class JwtIdentityProvider:
    """JWT 기반 Identity Provider

    Args:
        secret_key: 서명 키 (secrets.yaml web.secret_key)
        ttl_hours: 토큰 유효 시간
    """

    def __init__(self, secret_key: str, ttl_hours: int = Defaults.TOKEN_TTL_HOURS):
        if not secret_key:
            raise ValueError("secret_key는 비어 있을 수 없습니다")
        self._secret_key = secret_key
        self._ttl = timedelta(hours=ttl_hours)

    def issue(self, identity: Identity) -> str:
        """토큰 발급"""
        issued_at = now_utc()
        payload = {
            "sub": str(identity.user_id),
            "role": identity.role,
            "status": identity.verification_status,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> Identity:
        """토큰 검증

        Raises:
            InvalidCredentials: 서명 불일치, 만료, 필수 claim 누락
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError as e:
            raise InvalidCredentials("토큰이 만료되었습니다. 다시 로그인하세요") from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"토큰 검증 실패: {e}")
            raise InvalidCredentials("유효하지 않은 토큰입니다") from e

        try:
            return Identity(
                user_id=int(payload["sub"]),
                role=str(payload["role"]),
                verification_status=str(payload["status"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidCredentials("토큰 정보가 올바르지 않습니다") from e
