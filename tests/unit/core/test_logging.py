"""
로깅 설정 테스트
"""

import logging
import sys
from pathlib import Path

import pytest

from core.logging import ExtraFormatter, LOG_FORMAT, setup_logging


def make_record(msg: str = "대출 상환", **extra) -> logging.LogRecord:
    record = logging.LogRecord("engine.loans", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestExtraFormatter:
    """ExtraFormatter 테스트"""

    def test_plain_message(self) -> None:
        line = ExtraFormatter("%(name)s | %(message)s").format(make_record())

        assert line == "engine.loans | 대출 상환"

    def test_appends_extra(self) -> None:
        record = make_record(loan_id=3, installment_index=2)

        line = ExtraFormatter("%(message)s").format(record)

        assert line == "대출 상환 | loan_id=3 installment_index=2"

    def test_redacts_secrets(self) -> None:
        record = make_record(order_id="SETOR-1", signature_key="abc123")

        line = ExtraFormatter("%(message)s").format(record)

        assert "abc123" not in line
        assert "signature_key=***" in line
        assert "order_id=SETOR-1" in line

    def test_extra_before_traceback(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "web", logging.ERROR, __file__, 1, "실패", None, sys.exc_info()
            )
        record.path = "/api/orders/checkout"

        line = ExtraFormatter("%(message)s").format(record)

        first_line, rest = line.split("\n", 1)
        assert first_line == "실패 | path=/api/orders/checkout"
        assert "ValueError: boom" in rest


class TestSetupLogging:
    """setup_logging 테스트"""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        yield
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_writes_file(self, tmp_path: Path) -> None:
        root = setup_logging("web", log_dir=tmp_path)

        logging.getLogger("engine.checkout").info("주문 생성", extra={"order_id": 7})
        for handler in root.handlers:
            handler.flush()

        content = (tmp_path / "web.log").read_text(encoding="utf-8")
        assert "주문 생성 | order_id=7" in content
        assert len(root.handlers) == 2

    def test_idempotent(self, tmp_path: Path) -> None:
        setup_logging("web", log_dir=tmp_path)
        root = setup_logging("web", log_dir=tmp_path)

        assert len(root.handlers) == 2

    def test_quiets_noisy_loggers(self, tmp_path: Path) -> None:
        setup_logging("web", log_dir=tmp_path)

        assert logging.getLogger("aiosqlite").level == logging.WARNING
        assert LOG_FORMAT.startswith("%(asctime)s")
