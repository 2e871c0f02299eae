"""
State Machine 테스트
"""

import pytest

from core.domain.state_machines import (
    LoanStateMachine,
    OrderStateMachine,
    SavingsStateMachine,
    StateMachineError,
    VerificationStateMachine,
)
from core.types import LoanStatus, OrderStatus, SavingsStatus, VerificationStatus


class TestOrderStateMachine:
    """주문 상태 전이"""

    def test_happy_path(self) -> None:
        machine = OrderStateMachine()

        machine.transition(OrderStatus.PROCESSING)
        machine.transition(OrderStatus.COMPLETED)

        assert machine.state == "completed"
        assert machine.is_terminal
        assert machine.history == [("pending", "processing"), ("processing", "completed")]

    @pytest.mark.parametrize("start", ["pending", "processing"])
    def test_cancel_allowed(self, start: str) -> None:
        assert OrderStateMachine(start).can_transition(OrderStatus.CANCELLED)

    def test_completed_cannot_cancel(self) -> None:
        machine = OrderStateMachine(OrderStatus.COMPLETED)

        with pytest.raises(StateMachineError):
            machine.transition(OrderStatus.CANCELLED)

    def test_pending_cannot_complete(self) -> None:
        assert not OrderStateMachine().can_transition("completed")


class TestLoanStateMachine:
    """대출 상태 전이"""

    def test_decisions_from_pending(self) -> None:
        machine = LoanStateMachine()

        assert machine.can_transition(LoanStatus.APPROVED)
        assert machine.can_transition(LoanStatus.REJECTED)
        assert not machine.can_transition(LoanStatus.PAID_OFF)

    def test_accepts_repayment_only_when_approved(self) -> None:
        assert LoanStateMachine(LoanStatus.APPROVED).accepts_repayment
        assert not LoanStateMachine(LoanStatus.PENDING).accepts_repayment
        assert not LoanStateMachine(LoanStatus.PAID_OFF).accepts_repayment
        assert not LoanStateMachine(LoanStatus.REJECTED).accepts_repayment

    def test_paid_off_is_terminal(self) -> None:
        machine = LoanStateMachine(LoanStatus.APPROVED)
        machine.transition(LoanStatus.PAID_OFF)

        assert machine.is_terminal

    def test_second_decision_rejected(self) -> None:
        assert not LoanStateMachine(LoanStatus.APPROVED).can_transition("rejected")


class TestSavingsStateMachine:
    """저축 요청 상태 전이"""

    def test_pending_to_processed(self) -> None:
        assert SavingsStateMachine().can_transition(SavingsStatus.APPROVED)
        assert SavingsStateMachine().can_transition(SavingsStatus.REJECTED)

    def test_processed_is_terminal(self) -> None:
        assert SavingsStateMachine(SavingsStatus.APPROVED).is_terminal
        assert SavingsStateMachine(SavingsStatus.REJECTED).is_terminal


class TestVerificationStateMachine:
    """회원 인증 상태 전이"""

    def test_pending_to_verified(self) -> None:
        assert VerificationStateMachine().can_transition(VerificationStatus.VERIFIED)

    def test_rejected_can_be_reviewed(self) -> None:
        assert VerificationStateMachine("rejected").can_transition("verified")

    def test_no_return_to_pending(self) -> None:
        assert not VerificationStateMachine("verified").can_transition("pending")
