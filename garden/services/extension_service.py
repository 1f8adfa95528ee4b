"""
예약 연장 가격 계산 서비스 (ExtensionPricingService)

역할:
    - 기존 예약(체크인/체크아웃) + 새로 추가하는 연장 주(week)의 가격 계산
    - 시즌 할인: 연장 기간만 대상
    - 기간 할인: 기존 + 연장을 합친 전체 숙박 기준

Rationale:
    [질문 1] 기존 예약의 주 수는 어떻게 복원하나?
    -> 저장된 체크인/체크아웃 날짜만 사용합니다 (달력 선택은 남아있지 않음).
       할인 적용 주 수는 올림(ceil)으로 계산해 연장분이 과다 청구되지 않게 하고,
       화면 표시용 주 수는 소수 첫째 자리 반올림값을 따로 계산합니다.

    [질문 2] 청구 대상은?
    -> 숙박비/식비/할인 코드/VAT 모두 연장분에만 적용합니다.
       다만 식비 기본 금액과 슬라이더 범위는 합산 숙박일수를 기준으로 합니다.

실행: pytest tests/services/test_extension_service.py -v
"""
import logging
from datetime import date
from typing import Optional, Sequence

from garden.models.dto import (
    Accommodation,
    AppliedDiscount,
    ExtensionPricingDetails,
    ExtensionQuote,
    Week,
)
from garden.services.pricing_service import PricingService
from garden.utils.money import round1
from garden.utils.stay_dates import (
    calculate_original_discount_weeks,
    calculate_stay_duration,
    nights_between,
)
from garden.validate.week_validator import validate_extension_weeks

logger = logging.getLogger("garden")


class ExtensionPricingService:
    """기존 예약 연장 가격 계산"""

    def __init__(self, pricing_service: Optional[PricingService] = None):
        self.pricing_service = pricing_service or PricingService()

    def quote(
        self,
        check_in: date,
        check_out: date,
        extension_weeks: Sequence[Week],
        accommodation: Optional[Accommodation] = None,
        food_contribution: Optional[float] = None,
        discount: Optional[AppliedDiscount] = None,
        promotional: bool = False,
    ) -> ExtensionQuote:
        """
        Price the extension weeks of an existing booking.

        Parameters:
            check_in (date): Stored check-in of the original booking.
            check_out (date): Stored check-out of the original booking.
            extension_weeks (Sequence[Week]): Newly selected weeks, starting on or after
                `check_out`.
            accommodation (Optional[Accommodation]): Accommodation of the booking.
            food_contribution (Optional[float]): Weekly food & facilities slider value.
            discount (Optional[AppliedDiscount]): Validated discount code, applied to the
                extension amounts only.
            promotional (bool): Whether the fixed promotional food range applies.

        Returns:
            ExtensionQuote: Extension-only pricing with the original and combined stay
            figures, the food range, and the extension season breakdown.

        Raises:
            WeekSelectionError: If the extension weeks overlap each other or the original stay.
        """
        validate_extension_weeks(extension_weeks, check_out)

        original_nights = nights_between(check_in, check_out)
        original_discount_weeks = calculate_original_discount_weeks(original_nights)
        original_weeks_display = round1(original_nights / 7) if original_nights > 0 else 0.0

        extension = calculate_stay_duration(extension_weeks)
        combined_discount_weeks = original_discount_weeks + extension.complete_weeks
        combined_nights = original_nights + extension.total_nights

        pricing_service = self.pricing_service
        breakdown = pricing_service.season_service.breakdown_for_weeks(extension_weeks)
        seasonal = pricing_service.season_service.seasonal_discount_for(breakdown, accommodation)
        duration = pricing_service.duration_discount_for(combined_discount_weeks)

        pricing = pricing_service.build_pricing(
            extension,
            seasonal_discount=seasonal,
            duration_discount=duration,
            accommodation=accommodation,
            food_contribution=food_contribution,
            discount=discount,
            food_rate_nights=combined_nights,
        )
        details = ExtensionPricingDetails(
            **pricing.model_dump(),
            original_nights=original_nights,
            original_weeks_display=original_weeks_display,
            original_discount_weeks=original_discount_weeks,
            extension_nights=extension.total_nights,
            combined_discount_weeks=combined_discount_weeks,
        )

        logger.debug({
            "event": "extension_pricing_calculated",
            "original_nights": original_nights,
            "original_discount_weeks": original_discount_weeks,
            "extension_nights": extension.total_nights,
            "combined_discount_weeks": combined_discount_weeks,
            "duration_discount": duration,
            "seasonal_discount": seasonal,
            "total_amount": details.total_amount,
        })

        food_range = pricing_service.calculate_food_contribution_range(
            combined_nights, duration, promotional
        )
        return ExtensionQuote(
            pricing=details,
            food_range=food_range,
            season_breakdown=breakdown,
            applied_discount=discount,
        )

    def calculate_extension_pricing(
        self,
        check_in: date,
        check_out: date,
        extension_weeks: Sequence[Week],
        accommodation: Optional[Accommodation] = None,
        food_contribution: Optional[float] = None,
        discount: Optional[AppliedDiscount] = None,
    ) -> ExtensionPricingDetails:
        return self.quote(
            check_in,
            check_out,
            extension_weeks,
            accommodation=accommodation,
            food_contribution=food_contribution,
            discount=discount,
        ).pricing
