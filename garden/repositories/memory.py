import threading
import uuid
from typing import Dict, Iterable, List, Optional

from garden.exception.service.credits_exception import InsufficientCreditsError
from garden.models.dto import Accommodation, Booking, DiscountCodeRecord, PaymentRecord
from garden.repositories.base import (
    IAccommodationRepository,
    IBookingRepository,
    ICreditsRepository,
    IDiscountCodeRepository,
    IPaymentRepository,
)
from garden.utils.money import round2


class MockAccommodationRepository(IAccommodationRepository):
    """
    In-Memory Mock 숙소 저장소

    Note:
        서버 재시작 시 데이터가 초기화됩니다.
    """

    def __init__(self, accommodations: Iterable[Accommodation] = ()):
        self._data: Dict[str, Accommodation] = {item.id: item for item in accommodations}

    def add(self, accommodation: Accommodation) -> None:
        self._data[accommodation.id] = accommodation

    def get(self, accommodation_id: str) -> Optional[Accommodation]:
        return self._data.get(accommodation_id)


class MockDiscountCodeRepository(IDiscountCodeRepository):
    """코드(대문자)를 키로 보관하는 In-Memory 할인 코드 저장소"""

    def __init__(self, codes: Iterable[DiscountCodeRecord] = ()):
        self._data: Dict[str, DiscountCodeRecord] = {item.code.upper(): item for item in codes}

    def add(self, record: DiscountCodeRecord) -> None:
        self._data[record.code.upper()] = record

    def find_by_code(self, code: str) -> Optional[DiscountCodeRecord]:
        return self._data.get(code)


class MockCreditsRepository(ICreditsRepository):
    """잔액 확인과 차감을 하나의 Lock 안에서 수행 (DB 함수 deduct_user_credits와 동일한 보장)"""

    def __init__(self, balances: Optional[Dict[str, float]] = None):
        self._data: Dict[str, float] = dict(balances or {})
        self._lock = threading.Lock()

    def set_balance(self, user_id: str, credits: float) -> None:
        self._data[user_id] = credits

    def get_balance(self, user_id: str) -> float:
        return self._data.get(user_id, 0.0)

    def deduct(self, user_id: str, amount: float) -> float:
        with self._lock:
            balance = self._data.get(user_id, 0.0)
            if round2(balance - amount) < 0:
                raise InsufficientCreditsError()
            remaining = round2(balance - amount)
            self._data[user_id] = remaining
            return remaining


class MockBookingRepository(IBookingRepository):
    def __init__(self, bookings: Iterable[Booking] = ()):
        self._data: Dict[str, Booking] = {item.id: item for item in bookings}

    def add(self, booking: Booking) -> None:
        self._data[booking.id] = booking

    def get(self, booking_id: str) -> Optional[Booking]:
        return self._data.get(booking_id)


class MockPaymentRepository(IPaymentRepository):
    """저장된 결제 기록은 payments 리스트로 확인할 수 있습니다."""

    def __init__(self):
        self.payments: List[PaymentRecord] = []

    def create(self, payment: PaymentRecord) -> PaymentRecord:
        saved = payment.model_copy(update={"id": payment.id or str(uuid.uuid4())})
        self.payments.append(saved)
        return saved
