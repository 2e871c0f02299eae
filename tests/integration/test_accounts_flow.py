"""
회원 계정 및 상품 카탈로그 통합 테스트
"""

import pytest

from core.errors import (
    DuplicateRegistration,
    InvalidCredentials,
    InvalidStateTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)

pytestmark = pytest.mark.integration


class TestRegistration:
    """가입 / 로그인"""

    @pytest.mark.asyncio
    async def test_register_pending(self, engine) -> None:
        user = await engine.accounts.register(
            nik="3201010101", name="Dewi", email="Dewi@Desa.id", password="rahasia"
        )

        assert user.verification_status == "pending"
        assert user.role == "member"
        assert user.balance == 0
        assert user.email == "dewi@desa.id"

    @pytest.mark.asyncio
    async def test_duplicate_nik_or_email(self, engine) -> None:
        await engine.accounts.register(nik="1", name="A", email="a@desa.id", password="x")

        with pytest.raises(DuplicateRegistration):
            await engine.accounts.register(nik="1", name="B", email="b@desa.id", password="x")
        with pytest.raises(DuplicateRegistration):
            await engine.accounts.register(nik="2", name="B", email="a@desa.id", password="x")

    @pytest.mark.asyncio
    async def test_missing_fields(self, engine) -> None:
        with pytest.raises(ValidationError):
            await engine.accounts.register(nik=" ", name="A", email="a@desa.id", password="x")

    @pytest.mark.asyncio
    async def test_pending_member_cannot_login(self, engine) -> None:
        await engine.accounts.register(nik="1", name="A", email="a@desa.id", password="x")

        with pytest.raises(PermissionDenied):
            await engine.accounts.authenticate("1", "x", "member")

    @pytest.mark.asyncio
    async def test_login_by_nik_or_email(self, engine, make_member, password) -> None:
        user_id = await make_member(name="Budi", nik="3201")

        by_nik = await engine.accounts.authenticate("3201", password, "member")
        by_email = await engine.accounts.authenticate("BUDI@desa.id", password, "member")

        assert by_nik.id == by_email.id == user_id

    @pytest.mark.asyncio
    async def test_wrong_password(self, engine, make_member) -> None:
        await make_member(nik="3201")

        with pytest.raises(InvalidCredentials):
            await engine.accounts.authenticate("3201", "salah", "member")

    @pytest.mark.asyncio
    async def test_role_mismatch(self, engine, make_member, password) -> None:
        await make_member(nik="3201")

        with pytest.raises(InvalidCredentials):
            await engine.accounts.authenticate("3201", password, "admin")

    @pytest.mark.asyncio
    async def test_rejected_member(self, engine, make_member, password) -> None:
        await make_member(nik="3201", status="rejected")

        with pytest.raises(PermissionDenied):
            await engine.accounts.authenticate("3201", password, "member")

    @pytest.mark.asyncio
    async def test_admin_login_ignores_verification(self, engine, make_member, password) -> None:
        await make_member(name="Admin", role="admin", status="pending")

        admin = await engine.accounts.authenticate("admin@desa.id", password, "admin")

        assert admin.role == "admin"


class TestVerification:
    """관리자 회원 인증"""

    @pytest.mark.asyncio
    async def test_verify_and_notify(self, engine, make_member, mock_notifier) -> None:
        user_id = await make_member(status="pending", subscription={"endpoint": "https://push/1"})

        user = await engine.accounts.set_verification(user_id, "verified")
        await engine.dispatcher.drain()

        assert user.verification_status == "verified"
        assert mock_notifier.last_notification.message.body == "Akun kamu berhasil diverifikasi"
        assert mock_notifier.last_notification.message.url == "/login.html"

    @pytest.mark.asyncio
    async def test_list_members_by_status(self, engine, make_member) -> None:
        await make_member(name="A", status="pending")
        await make_member(name="B", status="verified")
        await make_member(name="Admin", role="admin")

        pending = await engine.accounts.list_members("pending")
        everyone = await engine.accounts.list_members()

        assert [u.name for u in pending] == ["A"]
        assert {u.name for u in everyone} == {"A", "B"}

    @pytest.mark.asyncio
    async def test_same_status_rejected(self, engine, make_member) -> None:
        user_id = await make_member(status="verified")

        with pytest.raises(InvalidStateTransition):
            await engine.accounts.set_verification(user_id, "verified")

    @pytest.mark.asyncio
    async def test_unknown_status(self, engine, make_member) -> None:
        user_id = await make_member(status="pending")

        with pytest.raises(ValidationError):
            await engine.accounts.set_verification(user_id, "banned")

    @pytest.mark.asyncio
    async def test_save_push_subscription(self, engine, make_member) -> None:
        user_id = await make_member()

        await engine.accounts.save_push_subscription(
            user_id, {"endpoint": "https://push/9", "keys": {"auth": "a"}}
        )

        user = await engine.accounts.get_user(user_id)
        assert user.push_subscription["endpoint"] == "https://push/9"

    @pytest.mark.asyncio
    async def test_save_subscription_without_endpoint(self, engine, make_member) -> None:
        user_id = await make_member()

        with pytest.raises(ValidationError):
            await engine.accounts.save_push_subscription(user_id, {"keys": {}})

    @pytest.mark.asyncio
    async def test_unknown_user(self, engine) -> None:
        with pytest.raises(NotFound):
            await engine.accounts.get_user(123)


class TestCatalog:
    """상품 CRUD"""

    @pytest.mark.asyncio
    async def test_create_update_delete(self, engine) -> None:
        product = await engine.catalog.create_product(
            "Minyak Goreng", 18_000, stock=20, category="Sembako"
        )
        assert product.stock == 20

        updated = await engine.catalog.update_product(product.id, price=19_000, stock=None)
        assert updated.price == 19_000
        assert updated.stock == 20

        await engine.catalog.delete_product(product.id)
        with pytest.raises(NotFound):
            await engine.catalog.get_product(product.id)

    @pytest.mark.asyncio
    async def test_list_newest_first(self, engine) -> None:
        await engine.catalog.create_product("A", 1_000)
        await engine.catalog.create_product("B", 2_000)

        assert [p.name for p in await engine.catalog.list_products()] == ["B", "A"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields",
        [{"price": 0}, {"stock": -1}, {"name": "  "}, {"unknown": 1}],
    )
    async def test_invalid_update(self, engine, fields) -> None:
        product = await engine.catalog.create_product("A", 1_000)

        with pytest.raises(ValidationError):
            await engine.catalog.update_product(product.id, **fields)

    @pytest.mark.asyncio
    async def test_update_missing(self, engine) -> None:
        with pytest.raises(NotFound):
            await engine.catalog.update_product(404, price=1_000)

    @pytest.mark.asyncio
    async def test_delete_missing(self, engine) -> None:
        with pytest.raises(NotFound):
            await engine.catalog.delete_product(404)
