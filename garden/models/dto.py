from datetime import date
from typing import List, Optional, Literal, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

AppliesTo = Literal["accommodation", "food_facilities", "total"]
APPLIES_TO_VALUES = ("accommodation", "food_facilities", "total")

PaymentType = Literal["initial", "extension", "refund"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]


class CamelModel(BaseModel):
    """프론트엔드(JS)와 주고받는 모델. 내부는 snake_case, JSON은 camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================== Stay / Accommodation ====================

class Week(CamelModel):
    """캘린더에서 선택된 한 주 (마지막/첫 주는 7일보다 짧을 수 있음)"""
    id: Optional[str] = None
    name: Optional[str] = None
    start_date: date
    end_date: date
    selected_flex_date: Optional[date] = Field(None, description="Flexible check-in date overriding start_date")

    @model_validator(mode="after")
    def validate_range(self):
        """
        Validate that `end_date` is strictly after `start_date` and that a flexible
        check-in date, when present, falls inside the week.

        Raises:
            ValueError: If the week is empty/reversed or the flex date lies outside it.
        """
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        if self.selected_flex_date is not None and not (
            self.start_date <= self.selected_flex_date < self.end_date
        ):
            raise ValueError("selected_flex_date must fall within the week")
        return self

    @property
    def effective_start_date(self) -> date:
        return self.selected_flex_date or self.start_date


class Accommodation(CamelModel):
    """숙소 정보 (accommodations 테이블)"""
    id: str
    title: str = ""
    base_price: float = Field(0, description="Weekly base price (EUR)")
    type: Optional[str] = None

    @field_validator("base_price", mode="before")
    @classmethod
    def handle_null_price(cls, v: Any) -> float:
        """DB에서 null로 오는 base_price를 0으로 변환"""
        return 0 if v is None else v

    @property
    def is_dorm(self) -> bool:
        return "dorm" in (self.title or "").lower()

    @property
    def is_test(self) -> bool:
        return self.type == "test"


class Booking(CamelModel):
    """기존 예약 (bookings 테이블) - 연장 가격 계산에 사용"""
    id: str
    user_id: Optional[str] = None
    accommodation_id: Optional[str] = None
    check_in: date
    check_out: date


# ==================== Seasons ====================

class Season(CamelModel):
    """시즌 정의. months는 1(1월)~12(12월)."""
    name: str
    discount: float = Field(..., ge=0, le=1)
    months: List[int]


class SeasonNights(CamelModel):
    name: str
    discount: float
    nights: int = Field(..., ge=0)


class SeasonBreakdown(CamelModel):
    has_multiple_seasons: bool = False
    seasons: List[SeasonNights] = Field(default_factory=list)

    @property
    def total_nights(self) -> int:
        return sum(season.nights for season in self.seasons)


# ==================== Discount Code ====================

class AppliedDiscount(CamelModel):
    """검증이 끝난 할인 코드. percentage_discount는 상한 없이 그대로 보관."""
    code: str
    percentage_discount: float
    applies_to: AppliesTo = "total"

    @field_validator("applies_to", mode="before")
    @classmethod
    def fallback_to_total(cls, v: Any) -> str:
        """알 수 없는 적용 대상은 전체 금액(total)으로 처리"""
        return v if v in APPLIES_TO_VALUES else "total"


class DiscountCodeRecord(BaseModel):
    """discount_codes 테이블 행"""
    id: Optional[str] = None
    code: str
    percentage_discount: float
    is_active: bool = True
    description: Optional[str] = None
    applies_to: Optional[str] = None


# ==================== Pricing Output ====================

class FoodContributionRange(CamelModel):
    min: int
    max: int
    default_value: int


class PricingDetails(CamelModel):
    """가격 계산 결과 스냅샷. 입력이 바뀔 때마다 처음부터 다시 계산됩니다."""
    total_nights: int = 0
    weeks_staying: float = 0
    nightly_accommodation_rate: float = 0
    base_accommodation_rate: float = 0
    effective_base_rate: float = 0
    total_accommodation_cost: float = 0
    total_food_and_facilities_cost: float = 0
    subtotal: float = 0
    duration_discount_amount: float = 0
    duration_discount_percent: float = 0
    seasonal_discount_percent: float = 0
    applied_code_discount_value: float = 0
    total_amount: float = 0
    vat_amount: float = 0
    total_with_vat: float = 0


class ExtensionPricingDetails(PricingDetails):
    """연장분 가격 + 기존/합산 숙박 정보"""
    original_nights: int = 0
    original_weeks_display: float = 0
    original_discount_weeks: int = 0
    extension_nights: int = 0
    combined_discount_weeks: int = 0


class CreditsSettlement(CamelModel):
    credits_used: float = 0
    amount_after_credits: float = 0
    credits_only: bool = False


# ==================== Persistence ====================

class PaymentBreakdown(BaseModel):
    """payments.breakdown_json 저장 포맷 (snake_case 유지)"""
    accommodation: float
    food_facilities: float
    accommodation_original: float
    duration_discount_percent: float
    seasonal_discount_percent: float
    discount_code: Optional[str] = None
    discount_code_percent: Optional[float] = None
    discount_code_applies_to: Optional[AppliesTo] = None
    discount_code_amount: float = 0
    credits_used: float = 0
    subtotal_before_discounts: float
    total_after_discounts: float
    vat_amount: float = 0


class PaymentRecord(BaseModel):
    """payments 테이블 행"""
    id: Optional[str] = None
    booking_id: Optional[str] = None
    user_id: str
    accommodation_id: Optional[str] = None
    start_date: date
    end_date: date
    amount_paid: float
    breakdown_json: Optional[PaymentBreakdown] = None
    discount_code: Optional[str] = None
    payment_type: PaymentType = "initial"
    stripe_payment_id: Optional[str] = None
    status: PaymentStatus = "pending"


# ==================== Request / Response ====================

class PricingQuoteRequest(CamelModel):
    """가격 견적 요청. accommodation_id 또는 accommodation 중 하나를 사용."""
    weeks: List[Week] = Field(default_factory=list)
    accommodation_id: Optional[str] = None
    accommodation: Optional[Accommodation] = None
    weekly_accommodation_price: Optional[float] = Field(None, ge=0)
    food_contribution: Optional[float] = Field(None, ge=0)
    discount_code: Optional[str] = None
    promotional: bool = False


class PricingQuote(CamelModel):
    pricing: PricingDetails
    food_range: FoodContributionRange
    season_breakdown: SeasonBreakdown
    applied_discount: Optional[AppliedDiscount] = None


class ExtensionPricingRequest(CamelModel):
    """예약 연장 견적 요청. booking_id가 없으면 check_in/check_out을 직접 받음."""
    booking_id: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    accommodation_id: Optional[str] = None
    accommodation: Optional[Accommodation] = None
    extension_weeks: List[Week] = Field(default_factory=list)
    food_contribution: Optional[float] = Field(None, ge=0)
    discount_code: Optional[str] = None
    promotional: bool = False

    @model_validator(mode="after")
    def require_original_stay(self):
        if self.booking_id is None and (self.check_in is None or self.check_out is None):
            raise ValueError("booking_id or both check_in and check_out are required")
        return self


class ExtensionQuote(CamelModel):
    pricing: ExtensionPricingDetails
    food_range: FoodContributionRange
    season_breakdown: SeasonBreakdown
    applied_discount: Optional[AppliedDiscount] = None


class DiscountCodeRequest(CamelModel):
    code: str = ""


class CreditsBalance(CamelModel):
    user_id: str
    credits: float


class BookingConfirmRequest(CamelModel):
    """예약 확정 요청. extend_booking_id가 있으면 연장 결제로 처리."""
    weeks: List[Week] = Field(..., min_length=1)
    accommodation_id: str
    food_contribution: Optional[float] = Field(None, ge=0)
    discount_code: Optional[str] = None
    use_credits: bool = False
    credits_to_use: Optional[float] = Field(None, ge=0)
    extend_booking_id: Optional[str] = None


class BookingConfirmation(CamelModel):
    payment: PaymentRecord
    pricing: PricingDetails
    settlement: CreditsSettlement
    requires_payment: bool

