"""
유틸리티 패키지

external_ref 생성, 타임존 처리 등 공통 유틸리티
"""

from core.utils.timezone import (
    now_utc,
    now_iso,
    to_timestamp_ms,
)

__all__ = [
    "now_utc",
    "now_iso",
    "to_timestamp_ms",
]
