"""
예약 확정 서비스 (BookingService)

역할:
    - 클라이언트가 보낸 금액은 신뢰하지 않고 서버에서 가격을 다시 계산
    - 크레딧 정산 → payments.breakdown_json 포맷(PaymentBreakdown) 생성 → 결제 기록 저장
    - 크레딧만으로 결제가 끝나면 게이트웨이를 건너뛰고 'paid' 상태로 저장

Rationale:
    [질문 1] 중복 확정(더블 클릭)은 어떻게 막나?
    -> (사용자, 숙소, 체크인, 체크아웃) 키를 처리 중 집합에 등록합니다.
       같은 키로 들어온 두 번째 요청은 BookingInProgressError(409)로 거절하고,
       첫 요청이 성공하든 실패하든 키를 해제합니다.

    [질문 2] 크레딧은 언제 차감하나?
    -> 크레딧 전용 결제일 때만, 결제 기록을 'paid'로 저장하기 전에 차감합니다.
       차감은 저장소에서 잔액 확인과 함께 원자적으로 수행되며, 그 사이 잔액이
       줄었다면 InsufficientCreditsError(409)로 확정 자체가 실패합니다.
       게이트웨이 결제가 필요한 경우 결제 기록은 'pending'으로 남고, 결제 완료 처리는 이 서비스의 범위 밖입니다.

실행: pytest tests/services/test_booking_service.py -v
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Hashable, Iterator, Optional, Set

from garden.exception.service.accommodation_exception import AccommodationNotFoundError
from garden.exception.service.booking_exception import (
    BookingAccommodationMismatchError,
    BookingInProgressError,
    BookingNotFoundError,
)
from garden.models.dto import (
    AppliedDiscount,
    Booking,
    BookingConfirmation,
    BookingConfirmRequest,
    CreditsSettlement,
    PaymentBreakdown,
    PaymentRecord,
    PricingDetails,
)
from garden.repositories.base import (
    IAccommodationRepository,
    IBookingRepository,
    IPaymentRepository,
)
from garden.services.credits_service import CreditsService
from garden.services.discount_code_service import DiscountCodeService
from garden.services.extension_service import ExtensionPricingService
from garden.services.pricing_service import PricingService
from garden.utils.money import round2
from garden.validate.week_validator import validate_week_selection

logger = logging.getLogger("garden")

CREDITS_ONLY_PREFIX = "credits-only-"


def build_payment_breakdown(
    pricing: PricingDetails,
    discount: Optional[AppliedDiscount],
    settlement: CreditsSettlement,
) -> PaymentBreakdown:
    """PricingDetails → payments.breakdown_json 저장 포맷"""
    return PaymentBreakdown(
        accommodation=pricing.total_accommodation_cost,
        food_facilities=pricing.total_food_and_facilities_cost,
        accommodation_original=round2(pricing.base_accommodation_rate * pricing.weeks_staying),
        duration_discount_percent=pricing.duration_discount_percent,
        seasonal_discount_percent=pricing.seasonal_discount_percent,
        discount_code=discount.code if discount else None,
        discount_code_percent=discount.percentage_discount if discount else None,
        discount_code_applies_to=discount.applies_to if discount else None,
        discount_code_amount=pricing.applied_code_discount_value,
        credits_used=settlement.credits_used,
        subtotal_before_discounts=pricing.subtotal,
        total_after_discounts=pricing.total_amount,
        vat_amount=pricing.vat_amount,
    )


class InFlightRegistry:
    """처리 중인 예약 확정 키 집합 (프로세스 내 공유, threading.Lock 보호)"""

    def __init__(self):
        self._keys: Set[Hashable] = set()
        self._lock = threading.Lock()

    def acquire(self, key: Hashable) -> None:
        with self._lock:
            if key in self._keys:
                raise BookingInProgressError()
            self._keys.add(key)

    def release(self, key: Hashable) -> None:
        with self._lock:
            self._keys.discard(key)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        self.acquire(key)
        try:
            yield
        finally:
            self.release(key)


class BookingService:
    """예약 확정 도메인 서비스"""

    def __init__(
        self,
        accommodation_repository: IAccommodationRepository,
        booking_repository: IBookingRepository,
        payment_repository: IPaymentRepository,
        discount_code_service: DiscountCodeService,
        credits_service: CreditsService,
        pricing_service: Optional[PricingService] = None,
        extension_service: Optional[ExtensionPricingService] = None,
        in_flight: Optional[InFlightRegistry] = None,
    ):
        self.accommodation_repository = accommodation_repository
        self.booking_repository = booking_repository
        self.payment_repository = payment_repository
        self.discount_code_service = discount_code_service
        self.credits_service = credits_service
        self.pricing_service = pricing_service or PricingService()
        self.extension_service = extension_service or ExtensionPricingService(self.pricing_service)
        self.in_flight = in_flight or InFlightRegistry()

    def confirm(self, user_id: str, request: BookingConfirmRequest) -> BookingConfirmation:
        """
        Recompute pricing for a booking request, settle credits, and persist the payment.

        Parameters:
            user_id (str): Identity of the booking user.
            request (BookingConfirmRequest): Selected weeks, accommodation, slider value,
                discount code, credits choice, and an optional booking id to extend.

        Returns:
            BookingConfirmation: The stored payment record, the recomputed pricing, the
            credits settlement, and whether a gateway payment is still required.

        Raises:
            WeekSelectionError: If the weeks are unordered or overlap.
            AccommodationNotFoundError: If the accommodation does not exist.
            BookingNotFoundError: If the booking to extend does not exist or belongs to
                another user.
            BookingAccommodationMismatchError: If an extension names a different
                accommodation than the booking it extends.
            DiscountCodeInvalidError / DiscountCodeInactiveError: If the code is rejected.
            BookingInProgressError: If the same confirmation is already being processed.
            InsufficientCreditsError: If the balance dropped below the settled credits
                before they could be deducted.
        """
        validate_week_selection(request.weeks)
        start_date = request.weeks[0].effective_start_date
        end_date = request.weeks[-1].end_date

        key = (user_id, request.accommodation_id, start_date.isoformat(), end_date.isoformat())
        with self.in_flight.hold(key):
            return self._confirm(user_id, request, start_date, end_date)

    # ==================== Private Methods ====================

    def _confirm(self, user_id, request, start_date, end_date) -> BookingConfirmation:
        booking = None
        if request.extend_booking_id:
            booking = self._get_own_booking(user_id, request.extend_booking_id)
            if booking.accommodation_id and booking.accommodation_id != request.accommodation_id:
                raise BookingAccommodationMismatchError()

        accommodation = self.accommodation_repository.get(request.accommodation_id)
        if accommodation is None:
            raise AccommodationNotFoundError()

        discount = self.discount_code_service.resolve(request.discount_code)

        if booking is not None:
            pricing: PricingDetails = self.extension_service.calculate_extension_pricing(
                booking.check_in,
                booking.check_out,
                request.weeks,
                accommodation=accommodation,
                food_contribution=request.food_contribution,
                discount=discount,
            )
            payment_type = "extension"
        else:
            pricing = self.pricing_service.calculate_pricing(
                request.weeks,
                accommodation=accommodation,
                food_contribution=request.food_contribution,
                discount=discount,
            )
            payment_type = "initial"

        settlement = self.credits_service.settle(
            user_id,
            pricing.total_amount,
            use_credits=request.use_credits,
            requested=request.credits_to_use,
        )

        payment = PaymentRecord(
            booking_id=request.extend_booking_id,
            user_id=user_id,
            accommodation_id=accommodation.id,
            start_date=start_date,
            end_date=end_date,
            amount_paid=settlement.amount_after_credits,
            breakdown_json=build_payment_breakdown(pricing, discount, settlement),
            discount_code=discount.code if discount else None,
            payment_type=payment_type,
        )

        if settlement.credits_only:
            # 'paid' 기록보다 차감이 먼저. 잔액 부족이면 InsufficientCreditsError로 확정 실패.
            if settlement.credits_used > 0:
                self.credits_service.deduct(user_id, settlement.credits_used)
            payment = payment.model_copy(update={
                "status": "paid",
                "stripe_payment_id": f"{CREDITS_ONLY_PREFIX}{uuid.uuid4().hex}",
            })

        try:
            saved = self.payment_repository.create(payment)
        except Exception:
            if settlement.credits_only and settlement.credits_used > 0:
                logger.error({
                    "event": "credits_deducted_without_payment",
                    "user_id": user_id,
                    "credits_used": settlement.credits_used,
                    "payment_type": payment_type,
                })
            raise

        logger.info({
            "event": "booking_confirmed",
            "payment_id": saved.id,
            "payment_type": payment_type,
            "status": saved.status,
            "total_amount": pricing.total_amount,
            "credits_used": settlement.credits_used,
            "credits_only": settlement.credits_only,
        })
        return BookingConfirmation(
            payment=saved,
            pricing=pricing,
            settlement=settlement,
            requires_payment=not settlement.credits_only,
        )

    def _get_own_booking(self, user_id: str, booking_id: str) -> Booking:
        """다른 사용자의 예약은 존재 여부를 드러내지 않고 '없음'으로 처리"""
        booking = self.booking_repository.get(booking_id)
        if booking is None or booking.user_id != user_id:
            raise BookingNotFoundError()
        return booking
