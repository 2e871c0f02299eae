"""
설정 로더

secrets.yaml 로드 및 DB / 결제 / 푸시 설정 생성
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, MidtransEndpoints, Paths
from core.types import AppMode, StoreBackend


@dataclass(frozen=True)
class DatabaseConfig:
    """저장소 연결 설정"""

    backend: StoreBackend
    sqlite_path: Path | None = None
    dsn: str | None = None
    pool_min: int = Defaults.POOL_MIN_SIZE
    pool_max: int = Defaults.POOL_MAX_SIZE


@dataclass(frozen=True)
class MidtransConfig:
    """Midtrans 결제 게이트웨이 설정"""

    server_key: str
    client_key: str
    snap_url: str


@dataclass(frozen=True)
class WebPushConfig:
    """웹 푸시 (VAPID) 설정

    키가 비어 있으면 푸시 알림 비활성화
    """

    vapid_private_key: str = ""
    vapid_public_key: str = ""
    contact: str = Defaults.PUSH_CONTACT

    @property
    def enabled(self) -> bool:
        return bool(self.vapid_private_key)


@dataclass(frozen=True)
class Secrets:
    """보안 설정 (secrets.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: AppMode
    database: DatabaseConfig
    web_secret_key: str
    midtrans: MidtransConfig
    webpush: WebPushConfig = field(default_factory=WebPushConfig)
    token_ttl_hours: int = Defaults.TOKEN_TTL_HOURS
    cors_origins: tuple[str, ...] = ("*",)


class SecretsLoadError(Exception):
    """Secrets 로드 실패 예외"""

    pass


def _load_mode(data: dict[str, Any]) -> AppMode:
    mode_str = data.get("mode")
    if mode_str is None:
        raise SecretsLoadError("secrets.yaml에 'mode' 필드가 없습니다")

    try:
        return AppMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in AppMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e


def _load_database(data: dict[str, Any], mode: AppMode) -> DatabaseConfig:
    db_config = data.get("database") or {}
    backend_str = db_config.get("backend", StoreBackend.SQLITE.value)

    try:
        backend = StoreBackend(backend_str)
    except ValueError as e:
        valid = [b.value for b in StoreBackend]
        raise SecretsLoadError(
            f"유효하지 않은 database.backend입니다: '{backend_str}'. 유효한 값: {valid}"
        ) from e

    if backend == StoreBackend.POSTGRES:
        dsn = db_config.get("dsn")
        if not dsn:
            raise SecretsLoadError(
                "database.backend가 postgres이면 'dsn'이 필요합니다"
            )
        return DatabaseConfig(
            backend=backend,
            dsn=dsn,
            pool_min=int(db_config.get("pool_min", Defaults.POOL_MIN_SIZE)),
            pool_max=int(db_config.get("pool_max", Defaults.POOL_MAX_SIZE)),
        )

    # SQLite: 경로 미지정 시 모드별 기본 경로
    sqlite_path = db_config.get("sqlite_path")
    if sqlite_path:
        path = Path(sqlite_path)
    else:
        path = get_db_path(mode)

    return DatabaseConfig(backend=backend, sqlite_path=path)


def _load_midtrans(data: dict[str, Any], mode: AppMode) -> MidtransConfig:
    midtrans_config = data.get("midtrans") or {}
    server_key = midtrans_config.get("server_key")

    if not server_key:
        raise SecretsLoadError(
            "secrets.yaml의 midtrans 섹션에 'server_key'가 없습니다"
        )

    snap_url = (
        MidtransEndpoints.PROD_SNAP_URL
        if mode == AppMode.PRODUCTION
        else MidtransEndpoints.SANDBOX_SNAP_URL
    )

    return MidtransConfig(
        server_key=server_key,
        client_key=midtrans_config.get("client_key", ""),
        snap_url=snap_url,
    )


def load_secrets(path: Path | None = None) -> Secrets:
    """secrets.yaml 파일 로드

    Args:
        path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Secrets 인스턴스

    Raises:
        SecretsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    if path is None:
        path = Paths.SECRETS_FILE

    if not path.exists():
        raise SecretsLoadError(f"secrets.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SecretsLoadError(f"secrets.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SecretsLoadError("secrets.yaml이 비어 있습니다")

    mode = _load_mode(data)
    database = _load_database(data, mode)
    midtrans = _load_midtrans(data, mode)

    # Web 설정
    web_config = data.get("web") or {}
    web_secret_key = web_config.get("secret_key", "")

    if not web_secret_key:
        raise SecretsLoadError(
            "secrets.yaml의 web 섹션에 'secret_key'가 없습니다"
        )

    cors_origins = web_config.get("cors_origins") or ["*"]

    # 웹 푸시 (선택)
    push_config = data.get("webpush") or {}
    webpush = WebPushConfig(
        vapid_private_key=push_config.get("vapid_private_key", ""),
        vapid_public_key=push_config.get("vapid_public_key", ""),
        contact=push_config.get("contact", Defaults.PUSH_CONTACT),
    )

    return Secrets(
        mode=mode,
        database=database,
        web_secret_key=web_secret_key,
        midtrans=midtrans,
        webpush=webpush,
        token_ttl_hours=int(web_config.get("token_ttl_hours", Defaults.TOKEN_TTL_HOURS)),
        cors_origins=tuple(cors_origins),
    )


def get_db_path(mode: AppMode | str) -> Path:
    """모드에 따른 SQLite DB 경로 반환

    Args:
        mode: 운영 모드 (PRODUCTION/SANDBOX)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if isinstance(mode, str):
        mode = AppMode(mode.lower())

    if mode == AppMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.SANDBOX_DB


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    secrets.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _secrets: Secrets | None = None

    def __new__(cls, secrets_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, secrets_path: Path | None = None) -> None:
        if self._secrets is None:
            self._secrets = load_secrets(secrets_path)

    @property
    def mode(self) -> AppMode:
        """현재 운영 모드"""
        assert self._secrets is not None
        return self._secrets.mode

    @property
    def database(self) -> DatabaseConfig:
        """저장소 설정"""
        assert self._secrets is not None
        return self._secrets.database

    @property
    def web_secret_key(self) -> str:
        """토큰 서명 키"""
        assert self._secrets is not None
        return self._secrets.web_secret_key

    @property
    def token_ttl_hours(self) -> int:
        """토큰 유효 시간"""
        assert self._secrets is not None
        return self._secrets.token_ttl_hours

    @property
    def cors_origins(self) -> list[str]:
        """CORS 허용 Origin"""
        assert self._secrets is not None
        return list(self._secrets.cors_origins)

    @property
    def midtrans(self) -> MidtransConfig:
        """Midtrans 설정"""
        assert self._secrets is not None
        return self._secrets.midtrans

    @property
    def webpush(self) -> WebPushConfig:
        """웹 푸시 설정"""
        assert self._secrets is not None
        return self._secrets.webpush

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._secrets = None


def get_settings(secrets_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        secrets_path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(secrets_path)
