"""
core/constants.py 테스트
"""

from pathlib import Path

from core.constants import PROJECT_ROOT, Defaults, Limits, MidtransEndpoints, Paths


class TestPaths:
    """경로 상수 테스트"""

    def test_paths_are_pathlib(self) -> None:
        assert isinstance(Paths.SECRETS_FILE, Path)
        assert isinstance(Paths.PROD_DB, Path)

    def test_under_project_root(self) -> None:
        assert Paths.CONFIG_DIR.parent == PROJECT_ROOT
        assert Paths.SANDBOX_DB.parent == Paths.DATA_DIR
        assert Paths.WEB_LOGS_DIR.parent == Paths.LOGS_DIR

    def test_db_files_differ(self) -> None:
        assert Paths.PROD_DB != Paths.SANDBOX_DB


class TestEndpoints:
    """Midtrans 엔드포인트"""

    def test_https(self) -> None:
        assert MidtransEndpoints.PROD_SNAP_URL.startswith("https://")
        assert "sandbox" in MidtransEndpoints.SANDBOX_SNAP_URL
        assert "sandbox" not in MidtransEndpoints.PROD_SNAP_URL


class TestDefaults:
    """기본값"""

    def test_pool_bounds(self) -> None:
        assert 0 < Defaults.POOL_MIN_SIZE <= Defaults.POOL_MAX_SIZE

    def test_report_limits(self) -> None:
        assert Limits.CASH_REPORT_ROWS == 50
        assert Limits.PROFILE_HISTORY_ROWS <= Limits.HISTORY_ROWS
