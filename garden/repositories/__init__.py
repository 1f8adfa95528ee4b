from garden.repositories.base import (
    IAccommodationRepository,
    IBookingRepository,
    ICreditsRepository,
    IDiscountCodeRepository,
    IPaymentRepository,
)
from garden.repositories.memory import (
    MockAccommodationRepository,
    MockBookingRepository,
    MockCreditsRepository,
    MockDiscountCodeRepository,
    MockPaymentRepository,
)

__all__ = [
    "IAccommodationRepository",
    "IBookingRepository",
    "ICreditsRepository",
    "IDiscountCodeRepository",
    "IPaymentRepository",
    "MockAccommodationRepository",
    "MockBookingRepository",
    "MockCreditsRepository",
    "MockDiscountCodeRepository",
    "MockPaymentRepository",
]
