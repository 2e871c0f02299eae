"""
어댑터 Protocol 준수 테스트
"""

from pathlib import Path

from adapters.auth.identity import JwtIdentityProvider
from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import IIdentityProvider, INotifier, ITransactionalStore
from adapters.mock.notifier import MockNotifier


class TestProtocols:
    """runtime_checkable Protocol 검사"""

    def test_sqlite_adapter_is_store(self, tmp_path: Path) -> None:
        assert isinstance(SQLiteAdapter(tmp_path / "x.db"), ITransactionalStore)

    def test_mock_notifier_is_notifier(self) -> None:
        assert isinstance(MockNotifier(), INotifier)

    def test_jwt_provider_is_identity_provider(self) -> None:
        assert isinstance(JwtIdentityProvider("secret"), IIdentityProvider)

    def test_notifier_is_not_store(self) -> None:
        assert not isinstance(MockNotifier(), ITransactionalStore)
