"""
State Machines

Order, Loan, Savings, 회원 인증 등 핵심 엔티티의 상태 전이 관리.
엔진은 조건부 UPDATE 전에 전이 가능 여부를 여기서 검증한다.
"""

import logging
from enum import Enum

from core.types import LoanStatus, OrderStatus, SavingsStatus, VerificationStatus

logger = logging.getLogger(__name__)


class StateMachineError(Exception):
    """상태 전이 오류"""
    pass


class StateMachine:
    """상태 머신 기본 클래스

    Args:
        initial_state: 초기 상태
        transitions: 허용된 전이 정의 {from_state: [to_states]}
        name: 머신 이름 (로깅용)
    """

    def __init__(
        self,
        initial_state: str | Enum,
        transitions: dict[str, list[str]],
        name: str = "StateMachine",
    ):
        self._state = initial_state.value if isinstance(initial_state, Enum) else initial_state
        self._transitions = transitions
        self._name = name
        self._history: list[tuple[str, str]] = []

    @property
    def state(self) -> str:
        """현재 상태"""
        return self._state

    def can_transition(self, to_state: str | Enum) -> bool:
        """전이 가능 여부 확인"""
        target = to_state.value if isinstance(to_state, Enum) else to_state
        allowed = self._transitions.get(self._state, [])
        return target in allowed

    def transition(self, to_state: str | Enum) -> str:
        """상태 전이

        Args:
            to_state: 목표 상태

        Returns:
            새 상태

        Raises:
            StateMachineError: 허용되지 않은 전이
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state

        if not self.can_transition(target):
            allowed = self._transitions.get(self._state, [])
            raise StateMachineError(
                f"{self._name}: Cannot transition from {self._state} to {target}. "
                f"Allowed: {allowed}"
            )

        old_state = self._state
        self._state = target
        self._history.append((old_state, target))

        logger.debug(f"{self._name}: {old_state} → {target}")

        return target

    @property
    def is_terminal(self) -> bool:
        """종료 상태 여부 (더 이상 전이 불가)"""
        return not self._transitions.get(self._state)

    @property
    def history(self) -> list[tuple[str, str]]:
        """상태 전이 이력"""
        return self._history.copy()


class OrderStateMachine(StateMachine):
    """주문 상태 머신

    전이 규칙:
    - pending → processing: 관리자 처리 시작
    - pending → cancelled: 취소 (재고 복원 + 환불)
    - processing → completed: 전달 완료
    - processing → cancelled: 취소 (재고 복원 + 환불)
    """

    TRANSITIONS: dict[str, list[str]] = {
        OrderStatus.PENDING.value: [OrderStatus.PROCESSING.value, OrderStatus.CANCELLED.value],
        OrderStatus.PROCESSING.value: [OrderStatus.COMPLETED.value, OrderStatus.CANCELLED.value],
    }

    def __init__(self, initial_state: str | OrderStatus = OrderStatus.PENDING):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name="OrderStateMachine",
        )


class LoanStateMachine(StateMachine):
    """대출 상태 머신

    전이 규칙:
    - pending → approved: 승인 (원금 지급)
    - pending → rejected: 거절
    - approved → paid_off: 마지막 회차 상환
    """

    TRANSITIONS: dict[str, list[str]] = {
        LoanStatus.PENDING.value: [LoanStatus.APPROVED.value, LoanStatus.REJECTED.value],
        LoanStatus.APPROVED.value: [LoanStatus.PAID_OFF.value],
    }

    def __init__(self, initial_state: str | LoanStatus = LoanStatus.PENDING):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name="LoanStateMachine",
        )

    @property
    def accepts_repayment(self) -> bool:
        """상환 가능 여부"""
        return self._state == LoanStatus.APPROVED.value


class SavingsStateMachine(StateMachine):
    """저축 거래 상태 머신

    전이 규칙:
    - pending → approved
    - pending → rejected
    """

    TRANSITIONS: dict[str, list[str]] = {
        SavingsStatus.PENDING.value: [SavingsStatus.APPROVED.value, SavingsStatus.REJECTED.value],
    }

    def __init__(self, initial_state: str | SavingsStatus = SavingsStatus.PENDING):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name="SavingsStateMachine",
        )


class VerificationStateMachine(StateMachine):
    """회원 인증 상태 머신

    전이 규칙:
    - pending → verified / rejected
    - rejected → verified: 재심사
    - verified → rejected: 자격 박탈
    """

    TRANSITIONS: dict[str, list[str]] = {
        VerificationStatus.PENDING.value: [
            VerificationStatus.VERIFIED.value,
            VerificationStatus.REJECTED.value,
        ],
        VerificationStatus.REJECTED.value: [VerificationStatus.VERIFIED.value],
        VerificationStatus.VERIFIED.value: [VerificationStatus.REJECTED.value],
    }

    def __init__(
        self,
        initial_state: str | VerificationStatus = VerificationStatus.PENDING,
    ):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name="VerificationStateMachine",
        )
