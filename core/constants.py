"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class MidtransEndpoints:
    """Midtrans Snap API 엔드포인트 (고정값)

    공식 문서: https://docs.midtrans.com/reference/backend-integration
    """

    # Production
    PROD_SNAP_URL: str = "https://app.midtrans.com/snap/v1/transactions"

    # Sandbox
    SANDBOX_SNAP_URL: str = "https://app.sandbox.midtrans.com/snap/v1/transactions"


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 3000

    API_VERSION: str = "1.0.0"

    # 토큰 유효 시간 (시간)
    TOKEN_TTL_HOURS: int = 24

    # PostgreSQL 커넥션 풀 크기
    POOL_MIN_SIZE: int = 2
    POOL_MAX_SIZE: int = 50

    # SQLite busy_timeout (밀리초)
    SQLITE_BUSY_TIMEOUT_MS: int = 30000

    # 푸시 알림 기본값
    PUSH_TITLE: str = "BUMDes Digital"
    PUSH_CONTACT: str = "mailto:admin@bumdes.com"

    # Midtrans 기본 메모
    DEPOSIT_MEMO: str = "Setoran Simpanan Desa"


class Limits:
    """조회/입력 제한값"""

    CASH_REPORT_ROWS: int = 50
    HISTORY_ROWS: int = 30
    PROFILE_HISTORY_ROWS: int = 5
    DASHBOARD_RECENT_ROWS: int = 5


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SECRETS_FILE: Path = CONFIG_DIR / "secrets.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "bumdes_prod.db"
    SANDBOX_DB: Path = DATA_DIR / "bumdes_sandbox.db"
