"""
가격 계산 도메인 서비스 (PricingService)

역할:
    - 숙박비: 주간 기본가 × (1 - 시즌 할인) × (1 - 기간 할인) × 표시 주 수
    - 식비/시설비(F&F): 슬라이더 주간 금액에 기간 할인을 적용하고 정수로 반올림한 뒤 주 수를 곱함
    - 할인 코드: 숙박비/식비/전체 중 하나에 정률 할인, 최종 금액은 0 미만으로 내려가지 않음
    - 부가세(VAT) 계산 및 테스트 숙소(type == "test") 오버라이드

Rationale:
    [질문 1] 반올림은 언제 하나?
    -> 마지막에 한 번이 아니라 정해진 지점마다 합니다 (round2, ROUND_HALF_UP).
       식비는 "주간 금액을 먼저 정수로 반올림 → 주 수 곱하기" 순서를 지켜야
       슬라이더에 보이는 주간 금액과 실제 청구액이 일치합니다 (WYSIWYG).

    [질문 2] 주 수는 어떤 값을 곱하나?
    -> 화면에 보이는 display_weeks(소수 첫째 자리 반올림)를 곱합니다.
       기간 할인 조회만 complete_weeks(내림)를 사용합니다.

    PricingDetails는 입력이 바뀔 때마다 처음부터 다시 계산되는 순수 함수 결과입니다.
    서비스는 공유 상태를 갖지 않으므로 동시에 여러 요청에서 사용해도 안전합니다.

실행: pytest tests/services/test_pricing_service.py -v
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from garden.core.config import FOOD_RANGE_FIXED, VAT_RATE
from garden.models.dto import (
    Accommodation,
    AppliedDiscount,
    FoodContributionRange,
    PricingDetails,
    PricingQuote,
    SeasonBreakdown,
    Week,
)
from garden.services.duration_discount import DurationDiscountTable
from garden.services.season_service import SeasonService
from garden.utils.money import round2, round_unit
from garden.utils.stay_dates import StayDuration, calculate_stay_duration

logger = logging.getLogger("garden")


class FoodContributionPolicy:
    """식비/시설비 슬라이더 정책 (기본 주간 금액 + 범위)"""

    def __init__(
        self,
        short_stay_rate: int = 345,
        long_stay_rate: int = 240,
        max_rate: int = 390,
        short_stay_max_nights: int = 6,
        promotional_range: Optional[Tuple[int, int, int]] = FOOD_RANGE_FIXED,
    ):
        self.short_stay_rate = short_stay_rate
        self.long_stay_rate = long_stay_rate
        self.max_rate = max_rate
        self.short_stay_max_nights = short_stay_max_nights
        self.promotional_range = promotional_range

    def default_weekly_rate(self, total_nights: int) -> int:
        """슬라이더 값이 없을 때의 주간 금액: 6박 이하 345, 그 이상 240"""
        if total_nights <= self.short_stay_max_nights:
            return self.short_stay_rate
        return self.long_stay_rate

    def contribution_range(
        self, total_nights: int, duration_discount: float, promotional: bool = False
    ) -> FoodContributionRange:
        """
        Compute the slider bounds for the weekly food & facilities contribution.

        The lower bound is the night-keyed default rate reduced by the duration discount;
        the upper bound is fixed. The default sits in the middle of the two. A promotional
        context replaces the formula with the configured fixed range, when one is set.

        Parameters:
            total_nights (int): Nights that key the lower bound.
            duration_discount (float): Duration discount fraction (0..1).
            promotional (bool): Whether the fixed promotional range applies.

        Returns:
            FoodContributionRange: Whole-unit `min`, `max` and `default_value`.
        """
        if promotional and self.promotional_range is not None:
            low, high, default = self.promotional_range
            return FoodContributionRange(min=low, max=high, default_value=default)

        base_min = self.default_weekly_rate(total_nights)
        discounted_min = round_unit(base_min * (1 - duration_discount))
        default_value = round_unit((discounted_min + self.max_rate) / 2)
        return FoodContributionRange(min=discounted_min, max=self.max_rate, default_value=default_value)


@dataclass(frozen=True)
class FoodCost:
    base_weekly_rate: float
    total_base_cost: float
    displayed_weekly_cost: int
    final_cost: float
    discount_amount: float


@dataclass(frozen=True)
class CodeDiscountResult:
    amount: float
    total: float


class PricingService:
    """예약 가격 계산 도메인 서비스"""

    def __init__(
        self,
        season_service: Optional[SeasonService] = None,
        duration_table: Optional[DurationDiscountTable] = None,
        food_policy: Optional[FoodContributionPolicy] = None,
        vat_rate: float = VAT_RATE,
    ):
        self.season_service = season_service or SeasonService()
        self.duration_table = duration_table or DurationDiscountTable.from_config()
        self.food_policy = food_policy or FoodContributionPolicy()
        self.vat_rate = vat_rate

    # ==================== Building Blocks ====================

    def calculate_weekly_accommodation_price(
        self, base_price: float, seasonal_discount: float, duration_discount: float
    ) -> float:
        """두 할인은 더하지 않고 곱으로 적용. 반올림은 총액 단계에서 수행."""
        if base_price <= 0:
            return 0.0
        return base_price * (1 - seasonal_discount) * (1 - duration_discount)

    def calculate_accommodation_cost(self, weekly_rate: float, display_weeks: float) -> float:
        return round2(weekly_rate * display_weeks)

    def calculate_food_cost(
        self,
        rate_nights: int,
        display_weeks: float,
        duration_discount: float,
        food_contribution: Optional[float] = None,
    ) -> FoodCost:
        """
        Compute the food & facilities charge so that the per-week figure on the slider and
        the charged total agree.

        Parameters:
            rate_nights (int): Nights used to pick the default weekly rate when
                `food_contribution` is not set.
            display_weeks (float): Week multiplier rounded to one decimal.
            duration_discount (float): Duration discount fraction (0..1).
            food_contribution (Optional[float]): Weekly rate chosen on the slider.

        Returns:
            FoodCost: The base rate, the pre-discount total, the whole-unit weekly cost
            after discount, the final charge, and the informational discount amount.
        """
        if food_contribution is not None:
            base_rate = food_contribution
        else:
            base_rate = self.food_policy.default_weekly_rate(rate_nights)

        total_base_cost = base_rate * display_weeks
        displayed_weekly = round_unit(base_rate * (1 - duration_discount))
        final_cost = round2(displayed_weekly * display_weeks)
        discount_amount = round2(total_base_cost - final_cost)

        return FoodCost(
            base_weekly_rate=base_rate,
            total_base_cost=round2(total_base_cost),
            displayed_weekly_cost=displayed_weekly,
            final_cost=final_cost,
            discount_amount=discount_amount,
        )

    def calculate_food_contribution_range(
        self, total_nights: int, duration_discount: float, promotional: bool = False
    ) -> FoodContributionRange:
        return self.food_policy.contribution_range(total_nights, duration_discount, promotional)

    def apply_discount_code(
        self,
        accommodation_cost: float,
        food_cost: float,
        subtotal: float,
        discount: Optional[AppliedDiscount],
    ) -> CodeDiscountResult:
        """
        Apply a percentage discount code to the accommodation, food, or whole subtotal.

        The discount amount is 0 when the targeted component costs nothing, and the
        resulting total never drops below 0, even for percentages above 100.

        Returns:
            CodeDiscountResult: The rounded discount amount and the final total.
        """
        if discount is None or subtotal <= 0:
            return CodeDiscountResult(amount=0.0, total=subtotal)

        if discount.applies_to == "accommodation":
            target = accommodation_cost
        elif discount.applies_to == "food_facilities":
            target = food_cost
        else:
            target = subtotal

        amount = round2(target * (discount.percentage_discount / 100)) if target > 0 else 0.0
        total = max(0.0, round2(subtotal - amount))
        return CodeDiscountResult(amount=amount, total=total)

    def calculate_vat(self, total: float) -> Tuple[float, float]:
        """(vat_amount, total_with_vat)"""
        vat = round2(total * self.vat_rate)
        return vat, round2(total + vat)

    def duration_discount_for(self, complete_weeks: int) -> float:
        return self.duration_table.lookup(complete_weeks)

    # ==================== Pricing ====================

    def build_pricing(
        self,
        stay: StayDuration,
        seasonal_discount: float,
        duration_discount: float,
        accommodation: Optional[Accommodation] = None,
        weekly_accommodation_price: Optional[float] = None,
        food_contribution: Optional[float] = None,
        discount: Optional[AppliedDiscount] = None,
        food_rate_nights: Optional[int] = None,
    ) -> PricingDetails:
        """
        Assemble a `PricingDetails` snapshot from already-resolved discounts.

        Parameters:
            stay (StayDuration): Nights and week counts of the period being charged.
            seasonal_discount (float): Effective seasonal fraction (dorm override applied).
            duration_discount (float): Duration fraction from the discount table.
            accommodation (Optional[Accommodation]): Selected accommodation; `None` charges
                no accommodation unless `weekly_accommodation_price` is given.
            weekly_accommodation_price (Optional[float]): Pre-computed weekly rate that
                replaces the derived one.
            food_contribution (Optional[float]): Weekly food & facilities slider value.
            discount (Optional[AppliedDiscount]): Validated discount code.
            food_rate_nights (Optional[int]): Nights that key the default food rate.
                Defaults to `stay.total_nights`.

        Returns:
            PricingDetails: Every money field rounded to cents.
        """
        base_price = accommodation.base_price if accommodation is not None else 0.0
        if weekly_accommodation_price is not None:
            weekly_rate = weekly_accommodation_price
        else:
            weekly_rate = self.calculate_weekly_accommodation_price(
                base_price, seasonal_discount, duration_discount
            )

        accommodation_cost = self.calculate_accommodation_cost(weekly_rate, stay.display_weeks)
        rate_nights = stay.total_nights if food_rate_nights is None else food_rate_nights
        food = self.calculate_food_cost(
            rate_nights, stay.display_weeks, duration_discount, food_contribution
        )
        subtotal = round2(accommodation_cost + food.final_cost)
        code = self.apply_discount_code(accommodation_cost, food.final_cost, subtotal, discount)
        vat, total_with_vat = self.calculate_vat(code.total)

        details = PricingDetails(
            total_nights=stay.total_nights,
            weeks_staying=stay.display_weeks,
            nightly_accommodation_rate=(
                round2(accommodation_cost / stay.total_nights) if stay.total_nights > 0 else 0.0
            ),
            base_accommodation_rate=base_price,
            effective_base_rate=food.base_weekly_rate,
            total_accommodation_cost=accommodation_cost,
            total_food_and_facilities_cost=food.final_cost,
            subtotal=subtotal,
            duration_discount_amount=food.discount_amount,
            duration_discount_percent=round2(duration_discount * 100),
            seasonal_discount_percent=round2(seasonal_discount * 100),
            applied_code_discount_value=code.amount,
            total_amount=code.total,
            vat_amount=vat,
            total_with_vat=total_with_vat,
        )

        if accommodation is not None and accommodation.is_test:
            details = self._apply_test_override(details)

        logger.debug({
            "event": "pricing_calculated",
            "total_nights": stay.total_nights,
            "display_weeks": stay.display_weeks,
            "complete_weeks": stay.complete_weeks,
            "weekly_rate": weekly_rate,
            "seasonal_discount": seasonal_discount,
            "duration_discount": duration_discount,
            "food_displayed_weekly": food.displayed_weekly_cost,
            "discount_code": discount.code if discount else None,
            "total_amount": details.total_amount,
            "total_with_vat": details.total_with_vat,
        })
        return details

    def quote(
        self,
        weeks: Sequence[Week],
        accommodation: Optional[Accommodation] = None,
        weekly_accommodation_price: Optional[float] = None,
        food_contribution: Optional[float] = None,
        discount: Optional[AppliedDiscount] = None,
        promotional: bool = False,
    ) -> PricingQuote:
        """
        Price a week selection end to end: season breakdown, seasonal and duration
        discounts, costs, discount code, VAT, and the food slider range.
        """
        stay = calculate_stay_duration(weeks)
        breakdown: SeasonBreakdown = self.season_service.breakdown_for_weeks(weeks)
        seasonal = self.season_service.seasonal_discount_for(breakdown, accommodation)
        duration = self.duration_discount_for(stay.complete_weeks)

        pricing = self.build_pricing(
            stay,
            seasonal_discount=seasonal,
            duration_discount=duration,
            accommodation=accommodation,
            weekly_accommodation_price=weekly_accommodation_price,
            food_contribution=food_contribution,
            discount=discount,
        )
        food_range = self.calculate_food_contribution_range(stay.total_nights, duration, promotional)
        return PricingQuote(
            pricing=pricing,
            food_range=food_range,
            season_breakdown=breakdown,
            applied_discount=discount,
        )

    def calculate_pricing(
        self,
        weeks: Sequence[Week],
        accommodation: Optional[Accommodation] = None,
        weekly_accommodation_price: Optional[float] = None,
        food_contribution: Optional[float] = None,
        discount: Optional[AppliedDiscount] = None,
    ) -> PricingDetails:
        return self.quote(
            weeks,
            accommodation=accommodation,
            weekly_accommodation_price=weekly_accommodation_price,
            food_contribution=food_contribution,
            discount=discount,
        ).pricing

    # ==================== Private Methods ====================

    def _apply_test_override(self, details: PricingDetails) -> PricingDetails:
        """테스트 숙소: 식비 0, 합계 = 숙박비, VAT 재계산"""
        total = details.total_accommodation_cost
        vat, total_with_vat = self.calculate_vat(total)
        return details.model_copy(update={
            "total_food_and_facilities_cost": 0.0,
            "subtotal": total,
            "total_amount": total,
            "duration_discount_amount": 0.0,
            "applied_code_discount_value": 0.0,
            "vat_amount": vat,
            "total_with_vat": total_with_vat,
        })
