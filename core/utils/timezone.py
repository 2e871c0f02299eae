"""
타임존 유틸리티

내부 저장은 UTC ISO 8601 문자열로 통일한다.
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)"""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """현재 UTC 시간의 ISO 8601 문자열 (DB 저장용)"""
    return now_utc().isoformat()


def to_timestamp_ms(dt: datetime) -> int:
    """datetime을 밀리초 타임스탬프로 변환

    Args:
        dt: datetime 객체 (타임존 포함 권장)

    Returns:
        Unix 타임스탬프 (밀리초)
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)
