"""
크레딧 정산 서비스 (CreditsService)

역할:
    - 최종 금액(VAT 제외)에서 사용자 크레딧 차감
    - 차감 후 잔액이 임계값(기본 0.50) 미만이면 결제 게이트웨이 없이 크레딧만으로 결제

실행: pytest tests/services/test_credits_service.py -v
"""
from typing import Optional

from garden.core.config import CREDITS_ONLY_THRESHOLD
from garden.models.dto import CreditsBalance, CreditsSettlement
from garden.repositories.base import ICreditsRepository
from garden.utils.money import round2


def settle_credits(
    total_amount: float,
    available_credits: float,
    use_credits: bool = True,
    requested: Optional[float] = None,
    threshold: float = CREDITS_ONLY_THRESHOLD,
) -> CreditsSettlement:
    """
    Apply credits to a final total.

    Parameters:
        total_amount (float): Total after discount code, before credits.
        available_credits (float): Current balance of the user.
        use_credits (bool): Credits toggle; when off nothing is used.
        requested (Optional[float]): Credits the user asked to spend. Defaults to the
            whole balance.
        threshold (float): Remaining amount below which no gateway payment is needed.

    Returns:
        CreditsSettlement: `credits_used = min(available, total, requested)` and the
        remaining amount clamped at 0.
    """
    if use_credits:
        limit = available_credits if requested is None else requested
        credits_used = round2(max(0.0, min(available_credits, total_amount, limit)))
    else:
        credits_used = 0.0

    after = max(0.0, round2(total_amount - credits_used))
    credits_only = after < threshold
    return CreditsSettlement(
        credits_used=credits_used,
        amount_after_credits=after,
        credits_only=credits_only,
    )


class CreditsService:
    def __init__(self, repository: ICreditsRepository, threshold: float = CREDITS_ONLY_THRESHOLD):
        self.repository = repository
        self.threshold = threshold

    def get_balance(self, user_id: str) -> CreditsBalance:
        return CreditsBalance(user_id=user_id, credits=max(0.0, self.repository.get_balance(user_id)))

    def settle(
        self,
        user_id: str,
        total_amount: float,
        use_credits: bool = True,
        requested: Optional[float] = None,
    ) -> CreditsSettlement:
        available = self.repository.get_balance(user_id) if use_credits else 0.0
        return settle_credits(total_amount, available, use_credits, requested, self.threshold)

    def deduct(self, user_id: str, amount: float) -> float:
        return self.repository.deduct(user_id, amount)
