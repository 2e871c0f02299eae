"""
대출 API

POST /api/loans/apply             - 대출 신청
POST /api/loans/pay               - 할부 상환 (잔액 차감)
GET  /api/loans/mine              - 내 대출
GET  /api/loans/{id}/repayments   - 상환 내역
GET  /api/admin/loans             - 전체 대출 (관리자)
GET  /api/admin/loans/pending     - 승인 대기 대출 (관리자)
PUT  /api/admin/loans/{id}/status - 승인/거절 (관리자)
"""

from typing import Any

from fastapi import APIRouter, Depends

from core.errors import NotFound
from core.types import Identity, LoanStatus
from engine.manager import LedgerEngine
from web.dependencies import get_current_identity, get_engine, require_admin
from web.models.requests import LoanApplyRequest, LoanDecisionRequest, RepaymentRequest
from web.models.responses import RepaymentResponse

router = APIRouter(prefix="/api", tags=["loans"])


@router.post("/loans/apply", status_code=201)
async def apply_loan(
    request: LoanApplyRequest,
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """대출 신청"""
    loan = await engine.loans.apply(
        identity.user_id,
        principal=request.principal,
        term_months=request.term_months,
        installment_amount=request.installment_amount,
        purpose=request.purpose,
    )
    return {"message": "Pengajuan pinjaman terkirim", "loan": loan.to_dict()}


@router.post("/loans/pay", response_model=RepaymentResponse)
async def pay_installment(
    request: RepaymentRequest,
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> RepaymentResponse:
    """할부 상환"""
    repayment = await engine.loans.repay(request.loan_id, identity.user_id, request.amount)
    loan = await engine.loans.get_loan(request.loan_id)

    message = (
        "Selamat! Pinjaman Anda sudah lunas"
        if loan.status == LoanStatus.PAID_OFF.value
        else f"Pembayaran angsuran ke-{repayment.installment_index} berhasil"
    )
    return RepaymentResponse(
        message=message,
        installment_index=repayment.installment_index,
        loan_status=loan.status,
    )


@router.get("/loans/mine")
async def my_loans(
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """내 대출 (최신순)"""
    loans = await engine.loans.list_for_user(identity.user_id)
    return [loan.to_dict() for loan in loans]


@router.get("/loans/{loan_id}/repayments")
async def loan_repayments(
    loan_id: int,
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """상환 내역 (본인 또는 관리자)"""
    loan = await engine.loans.get_loan(loan_id)
    if loan.user_id != identity.user_id and not identity.is_admin:
        raise NotFound("loan", loan_id)

    repayments = await engine.loans.list_repayments(loan_id)
    return [repayment.to_dict() for repayment in repayments]


@router.get("/admin/loans")
async def list_loans(
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """전체 대출"""
    loans = await engine.loans.list_all()
    return [loan.to_dict() for loan in loans]


@router.get("/admin/loans/pending")
async def list_pending_loans(
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """승인 대기 대출"""
    loans = await engine.loans.list_pending()
    return [loan.to_dict() for loan in loans]


@router.put("/admin/loans/{loan_id}/status")
async def decide_loan(
    loan_id: int,
    request: LoanDecisionRequest,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """대출 승인/거절 (승인 시 원금 지급)"""
    loan = await engine.loans.decide(loan_id, request.status, request.admin_note)
    return loan.to_dict()
