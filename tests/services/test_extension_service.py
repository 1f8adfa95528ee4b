"""
ExtensionPricingService 단위 테스트

테스트 대상:
- 기간 할인은 기존 + 연장 합산 기준
- 시즌 할인은 연장 기간만 기준
- 기존 예약 주 수 복원 (할인용 올림 / 표시용 반올림)

실행: pytest tests/services/test_extension_service.py -v
"""
import pytest
from datetime import date

from garden.exception.common.week_exception import WeekSelectionError
from garden.models.dto import AppliedDiscount, Week
from garden.services.duration_discount import DurationDiscountTable
from garden.services.extension_service import ExtensionPricingService
from garden.services.pricing_service import PricingService


@pytest.fixture
def pricing_service():
    return PricingService(duration_table=DurationDiscountTable([(2, 0.08), (4, 0.18), (8, 0.25)]))


@pytest.fixture
def svc(pricing_service):
    return ExtensionPricingService(pricing_service)


class TestCombinedDurationDiscount:
    """기존 6주 + 연장 2주 → 8주 구간"""

    def test_six_plus_two_weeks_reaches_eight_week_tier(self, svc, make_weeks, cabin):
        """기존 42박 + 연장 14박 → 25% 할인"""
        pricing = svc.calculate_extension_pricing(
            date(2025, 7, 5), date(2025, 8, 16),
            make_weeks(date(2025, 8, 16), 2),
            accommodation=cabin,
        )
        assert pricing.original_nights == 42
        assert pricing.original_discount_weeks == 6
        assert pricing.original_weeks_display == 6.0
        assert pricing.extension_nights == 14
        assert pricing.combined_discount_weeks == 8
        assert pricing.duration_discount_percent == 25
        # 연장분만 청구: 200 × 0.75 × 2주
        assert pricing.total_nights == 14
        assert pricing.weeks_staying == 2.0
        assert pricing.total_accommodation_cost == 300
        # 식비 기본값은 합산 56박 기준 240 → 180 × 2
        assert pricing.total_food_and_facilities_cost == 360
        assert pricing.subtotal == 660

    def test_same_weeks_without_history_get_small_tier(self, pricing_service, make_weeks, cabin):
        """같은 2주를 새 예약으로 계산하면 8%"""
        pricing = pricing_service.calculate_pricing(make_weeks(date(2025, 8, 16), 2), accommodation=cabin)
        assert pricing.duration_discount_percent == 8

    def test_partial_original_week_rounds_up(self, svc, make_weeks, cabin):
        """기존 10박 → 할인용 2주(올림), 표시용 1.4주"""
        pricing = svc.calculate_extension_pricing(
            date(2025, 7, 1), date(2025, 7, 11),
            make_weeks(date(2025, 7, 11), 2),
            accommodation=cabin,
        )
        assert pricing.original_discount_weeks == 2
        assert pricing.original_weeks_display == 1.4
        assert pricing.combined_discount_weeks == 4
        assert pricing.duration_discount_percent == 18


class TestExtensionSeasonalDiscount:
    """시즌 할인은 연장 기간만"""

    def test_seasonal_uses_extension_only(self, svc, cabin):
        """기존 예약(9~10월)과 무관하게 11월 연장분 → 40%"""
        extension = [Week(start_date=date(2025, 11, 1), end_date=date(2025, 11, 8))]
        result = svc.quote(date(2025, 9, 20), date(2025, 10, 18), extension, accommodation=cabin)
        assert result.pricing.seasonal_discount_percent == 40
        assert [s.name for s in result.season_breakdown.seasons] == ["Low Season"]
        # 기존 28박(4주) + 연장 1주 = 5주 → 18%
        assert result.pricing.duration_discount_percent == 18
        # 200 × 0.6 × 0.82 × 1주
        assert result.pricing.total_accommodation_cost == 98.4

    def test_dorm_override_in_extension(self, svc, dorm):
        extension = [Week(start_date=date(2025, 11, 1), end_date=date(2025, 11, 8))]
        pricing = svc.calculate_extension_pricing(
            date(2025, 10, 4), date(2025, 11, 1), extension, accommodation=dorm
        )
        assert pricing.seasonal_discount_percent == 0


class TestExtensionAmounts:
    """할인 코드/VAT/테스트 숙소는 연장분에만 적용"""

    def test_code_applies_to_extension_amounts(self, svc, make_weeks, cabin):
        discount = AppliedDiscount(code="STAY10", percentage_discount=10, applies_to="accommodation")
        pricing = svc.calculate_extension_pricing(
            date(2025, 7, 5), date(2025, 8, 16),
            make_weeks(date(2025, 8, 16), 2),
            accommodation=cabin,
            discount=discount,
        )
        assert pricing.applied_code_discount_value == 30
        assert pricing.total_amount == 630
        assert pricing.vat_amount == 151.2
        assert pricing.total_with_vat == 781.2

    def test_test_accommodation_override(self, svc, make_weeks, test_room):
        pricing = svc.calculate_extension_pricing(
            date(2025, 7, 5), date(2025, 8, 16),
            make_weeks(date(2025, 8, 16), 2),
            accommodation=test_room,
            food_contribution=345,
        )
        assert pricing.total_food_and_facilities_cost == 0
        assert pricing.total_amount == pricing.total_accommodation_cost

    def test_food_range_keyed_on_combined_nights(self, svc, make_weeks, cabin):
        """식비 범위: 합산 56박 + 25% → 최소 180"""
        result = svc.quote(
            date(2025, 7, 5), date(2025, 8, 16),
            make_weeks(date(2025, 8, 16), 2),
            accommodation=cabin,
        )
        assert result.food_range.min == 180
        assert result.food_range.default_value == 285


class TestExtensionValidation:
    def test_extension_overlapping_original_rejected(self, svc, make_weeks, cabin):
        """연장 주가 기존 체크아웃 이전에 시작하면 에러"""
        with pytest.raises(WeekSelectionError):
            svc.quote(date(2025, 7, 5), date(2025, 8, 16), make_weeks(date(2025, 8, 10), 1), accommodation=cabin)

    def test_empty_extension(self, svc, cabin):
        """연장 주가 없으면 금액 0"""
        pricing = svc.calculate_extension_pricing(date(2025, 7, 5), date(2025, 8, 16), [], accommodation=cabin)
        assert pricing.total_amount == 0
        assert pricing.original_nights == 42
        assert pricing.combined_discount_weeks == 6
