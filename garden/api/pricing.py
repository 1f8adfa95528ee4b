from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from garden.api.dependencies import (
    get_accommodation_repository,
    get_booking_repository,
    get_discount_code_service,
    get_extension_service,
    get_pricing_service,
)
from garden.core.config import QUOTE_RATE_LIMIT_PER_MINUTE
from garden.core.limiter import limiter
from garden.core.response import ApiResponse, success_response
from garden.exception.service.accommodation_exception import AccommodationNotFoundError
from garden.exception.service.booking_exception import BookingNotFoundError
from garden.models.dto import (
    Accommodation,
    ExtensionPricingRequest,
    ExtensionQuote,
    FoodContributionRange,
    PricingQuote,
    PricingQuoteRequest,
)
from garden.repositories.base import IAccommodationRepository, IBookingRepository
from garden.services.discount_code_service import DiscountCodeService
from garden.services.extension_service import ExtensionPricingService
from garden.services.pricing_service import PricingService
from garden.validate.week_validator import validate_week_selection

router = APIRouter(
    prefix="/api/pricing",
    tags=["Pricing"],
)


def resolve_accommodation(
    inline: Optional[Accommodation],
    accommodation_id: Optional[str],
    repo: IAccommodationRepository,
) -> Optional[Accommodation]:
    """요청에 숙소가 직접 포함되면 그대로 사용, id만 있으면 저장소에서 조회"""
    if inline is not None:
        return inline
    if accommodation_id is None:
        return None
    accommodation = repo.get(accommodation_id)
    if accommodation is None:
        raise AccommodationNotFoundError()
    return accommodation


@router.post("/quote", response_model=ApiResponse[PricingQuote])
@limiter.limit(f"{QUOTE_RATE_LIMIT_PER_MINUTE}/minute")
def quote(
    request: Request,
    req: PricingQuoteRequest,
    pricing_service: PricingService = Depends(get_pricing_service),
    discount_code_service: DiscountCodeService = Depends(get_discount_code_service),
    accommodation_repo: IAccommodationRepository = Depends(get_accommodation_repository),
):
    """
    선택된 주 기준 가격 견적

    - **weeks**: 오름차순, 서로 겹치지 않는 주 목록
    - **accommodationId / accommodation**: 숙소 id 또는 숙소 정보
    - **weeklyAccommodationPrice**: 이미 계산된 주간 숙박 단가 (없으면 시즌/기간 할인으로 계산)
    - **foodContribution**: 식비/시설비 슬라이더 주간 금액
    - **discountCode**: 할인 코드 (검증 실패 시 400)
    """
    validate_week_selection(req.weeks)
    accommodation = resolve_accommodation(req.accommodation, req.accommodation_id, accommodation_repo)
    discount = discount_code_service.resolve(req.discount_code)

    result = pricing_service.quote(
        req.weeks,
        accommodation=accommodation,
        weekly_accommodation_price=req.weekly_accommodation_price,
        food_contribution=req.food_contribution,
        discount=discount,
        promotional=req.promotional,
    )
    return success_response(result=result)


@router.post("/extension", response_model=ApiResponse[ExtensionQuote])
@limiter.limit(f"{QUOTE_RATE_LIMIT_PER_MINUTE}/minute")
def extension_quote(
    request: Request,
    req: ExtensionPricingRequest,
    extension_service: ExtensionPricingService = Depends(get_extension_service),
    discount_code_service: DiscountCodeService = Depends(get_discount_code_service),
    accommodation_repo: IAccommodationRepository = Depends(get_accommodation_repository),
    booking_repo: IBookingRepository = Depends(get_booking_repository),
):
    """
    기존 예약 연장 견적

    - **bookingId**: 연장할 예약 (없으면 checkIn/checkOut 직접 입력)
    - **extensionWeeks**: 기존 체크아웃 이후의 연장 주 목록
    - **promotional**: 프로모션 고정 식비 범위 사용 여부
    """
    check_in, check_out = req.check_in, req.check_out
    inline_accommodation, accommodation_id = req.accommodation, req.accommodation_id

    if req.booking_id is not None:
        booking = booking_repo.get(req.booking_id)
        if booking is None:
            raise BookingNotFoundError()
        check_in, check_out = booking.check_in, booking.check_out
        # 기존 예약의 숙소가 있으면 요청 값과 관계없이 그 숙소로 견적
        if booking.accommodation_id:
            inline_accommodation, accommodation_id = None, booking.accommodation_id

    accommodation = resolve_accommodation(inline_accommodation, accommodation_id, accommodation_repo)
    discount = discount_code_service.resolve(req.discount_code)

    result = extension_service.quote(
        check_in,
        check_out,
        req.extension_weeks,
        accommodation=accommodation,
        food_contribution=req.food_contribution,
        discount=discount,
        promotional=req.promotional,
    )
    return success_response(result=result)


@router.get("/food-range", response_model=ApiResponse[FoodContributionRange])
def food_range(
    nights: int = Query(..., ge=0, description="총 숙박일수"),
    duration_discount: float = Query(0, ge=0, le=1, alias="durationDiscount", description="기간 할인율 (0~1)"),
    promotional: bool = Query(False, description="프로모션 고정 범위 사용 여부"),
    pricing_service: PricingService = Depends(get_pricing_service),
):
    """식비/시설비 슬라이더 범위"""
    result = pricing_service.calculate_food_contribution_range(nights, duration_discount, promotional)
    return success_response(result=result)
