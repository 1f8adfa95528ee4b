from __future__ import annotations
from functools import lru_cache
import uuid

from fastapi import Depends, Header, HTTPException

from garden.repositories.base import (
    IAccommodationRepository,
    IBookingRepository,
    ICreditsRepository,
    IDiscountCodeRepository,
    IPaymentRepository,
)
from garden.repositories.supabase_repository import (
    SupabaseAccommodationRepository,
    SupabaseBookingRepository,
    SupabaseCreditsRepository,
    SupabaseDiscountCodeRepository,
    SupabasePaymentRepository,
)
from garden.services.booking_service import BookingService, InFlightRegistry
from garden.services.credits_service import CreditsService
from garden.services.discount_code_service import DiscountCodeService
from garden.services.extension_service import ExtensionPricingService
from garden.services.pricing_service import PricingService


# --- Repositories (Singleton via lru_cache, 테스트에서는 dependency_overrides로 교체) ---

@lru_cache(maxsize=1)
def get_accommodation_repository() -> IAccommodationRepository:
    return SupabaseAccommodationRepository()


@lru_cache(maxsize=1)
def get_discount_code_repository() -> IDiscountCodeRepository:
    return SupabaseDiscountCodeRepository()


@lru_cache(maxsize=1)
def get_credits_repository() -> ICreditsRepository:
    return SupabaseCreditsRepository()


@lru_cache(maxsize=1)
def get_booking_repository() -> IBookingRepository:
    return SupabaseBookingRepository()


@lru_cache(maxsize=1)
def get_payment_repository() -> IPaymentRepository:
    return SupabasePaymentRepository()


# --- Services ---

@lru_cache(maxsize=1)
def get_pricing_service() -> PricingService:
    """
    PricingService 의존성 주입 (Singleton via lru_cache)

    Returns:
        PricingService: 기본 시즌 달력 + 환경변수 기간 할인 테이블로 구성된 인스턴스
    """
    return PricingService()


def get_extension_service(
    pricing_service: PricingService = Depends(get_pricing_service),
) -> ExtensionPricingService:
    return ExtensionPricingService(pricing_service)


def get_discount_code_service(
    repo: IDiscountCodeRepository = Depends(get_discount_code_repository),
) -> DiscountCodeService:
    return DiscountCodeService(repo)


def get_credits_service(
    repo: ICreditsRepository = Depends(get_credits_repository),
) -> CreditsService:
    return CreditsService(repo)


@lru_cache(maxsize=1)
def get_in_flight_registry() -> InFlightRegistry:
    """예약 확정 중복 방지용 키 집합. 요청 간에 공유되어야 하므로 캐싱."""
    return InFlightRegistry()


def get_booking_service(
    accommodation_repo: IAccommodationRepository = Depends(get_accommodation_repository),
    booking_repo: IBookingRepository = Depends(get_booking_repository),
    payment_repo: IPaymentRepository = Depends(get_payment_repository),
    discount_code_service: DiscountCodeService = Depends(get_discount_code_service),
    credits_service: CreditsService = Depends(get_credits_service),
    pricing_service: PricingService = Depends(get_pricing_service),
    in_flight: InFlightRegistry = Depends(get_in_flight_registry),
) -> BookingService:
    return BookingService(
        accommodation_repository=accommodation_repo,
        booking_repository=booking_repo,
        payment_repository=payment_repo,
        discount_code_service=discount_code_service,
        credits_service=credits_service,
        pricing_service=pricing_service,
        in_flight=in_flight,
    )


def validate_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-Id")
) -> str:
    """
    X-User-Id 헤더 검증 및 반환 Dependency

    Raises:
        HTTPException(400): 헤더가 없거나 비어있는 경우, 또는 UUID 형식이 아닌 경우
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=400,
            detail="X-User-Id header is required and cannot be empty"
        )

    try:
        uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-User-Id format")

    return x_user_id
