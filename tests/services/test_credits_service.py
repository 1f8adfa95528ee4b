"""
크레딧 정산 단위 테스트

실행: pytest tests/services/test_credits_service.py -v
"""
import pytest

from garden.exception.service.credits_exception import InsufficientCreditsError
from garden.repositories.memory import MockCreditsRepository
from garden.services.credits_service import CreditsService, settle_credits

USER_ID = "5f0c3c3e-9a63-4a3c-9d4e-0b7f1c2d3e4f"


class TestSettleCredits:
    def test_partial_credits(self):
        """잔액 100 < 합계 545 → 100 사용, 445 결제 필요"""
        settlement = settle_credits(545, 100)
        assert settlement.credits_used == 100
        assert settlement.amount_after_credits == 445
        assert settlement.credits_only is False

    def test_credits_cover_total(self):
        """잔액이 합계보다 크면 합계만큼만 사용"""
        settlement = settle_credits(545, 1000)
        assert settlement.credits_used == 545
        assert settlement.amount_after_credits == 0
        assert settlement.credits_only is True

    def test_requested_amount_limits_usage(self):
        settlement = settle_credits(545, 1000, requested=50)
        assert settlement.credits_used == 50
        assert settlement.amount_after_credits == 495

    def test_toggle_off(self):
        settlement = settle_credits(545, 1000, use_credits=False)
        assert settlement.credits_used == 0
        assert settlement.amount_after_credits == 545
        assert settlement.credits_only is False

    def test_remaining_below_threshold_is_credits_only(self):
        """남은 금액 0.30 < 0.50 → 크레딧 전용"""
        settlement = settle_credits(100.3, 100)
        assert settlement.amount_after_credits == 0.3
        assert settlement.credits_only is True

    def test_threshold_is_exclusive(self):
        """남은 금액이 정확히 0.50이면 결제 필요"""
        settlement = settle_credits(100.5, 100)
        assert settlement.amount_after_credits == 0.5
        assert settlement.credits_only is False

    @pytest.mark.parametrize("total, available", [(0, 0), (10, 0), (0, 50), (99.99, 12.34)])
    def test_never_negative(self, total, available):
        settlement = settle_credits(total, available)
        assert settlement.amount_after_credits >= 0
        assert settlement.credits_used <= total


class TestCreditsService:
    def test_balance(self):
        svc = CreditsService(MockCreditsRepository({USER_ID: 120.5}))
        balance = svc.get_balance(USER_ID)
        assert balance.user_id == USER_ID
        assert balance.credits == 120.5

    def test_unknown_user_has_zero(self):
        svc = CreditsService(MockCreditsRepository())
        assert svc.get_balance(USER_ID).credits == 0

    def test_settle_reads_balance(self):
        svc = CreditsService(MockCreditsRepository({USER_ID: 600}))
        settlement = svc.settle(USER_ID, 545)
        assert settlement.credits_used == 545
        assert settlement.credits_only is True

    def test_deduct_returns_remaining(self):
        repo = MockCreditsRepository({USER_ID: 600})
        assert CreditsService(repo).deduct(USER_ID, 545) == 55
        assert repo.get_balance(USER_ID) == 55

    def test_deduct_more_than_balance_changes_nothing(self):
        """잔액보다 많이 차감하면 0으로 깎지 않고 거절"""
        repo = MockCreditsRepository({USER_ID: 10})
        with pytest.raises(InsufficientCreditsError):
            CreditsService(repo).deduct(USER_ID, 25)
        assert repo.get_balance(USER_ID) == 10
