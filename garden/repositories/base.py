from typing import Protocol, Optional

from garden.models.dto import Accommodation, Booking, DiscountCodeRecord, PaymentRecord


class IAccommodationRepository(Protocol):
    """숙소 저장소 인터페이스 (Repository Pattern Protocol)"""

    def get(self, accommodation_id: str) -> Optional[Accommodation]:
        """
        숙소 단건 조회

        Args:
            accommodation_id (str): 숙소 ID

        Returns:
            Optional[Accommodation]: 존재하지 않으면 None
        """
        ...


class IDiscountCodeRepository(Protocol):
    """할인 코드 저장소 인터페이스"""

    def find_by_code(self, code: str) -> Optional[DiscountCodeRecord]:
        """
        코드 문자열로 할인 코드 조회 (대소문자 정규화는 호출 측 책임)

        Args:
            code (str): 대문자로 정규화된 할인 코드

        Returns:
            Optional[DiscountCodeRecord]: 활성 여부와 관계없이 일치하는 행, 없으면 None
        """
        ...


class ICreditsRepository(Protocol):
    """사용자 크레딧 저장소 인터페이스"""

    def get_balance(self, user_id: str) -> float:
        """
        사용 가능한 크레딧 잔액 조회

        Returns:
            float: 0 이상의 잔액 (프로필이 없으면 0)
        """
        ...

    def deduct(self, user_id: str, amount: float) -> float:
        """
        크레딧 차감 (잔액 확인 + 차감이 하나의 원자적 연산)

        Args:
            user_id (str): 사용자 ID
            amount (float): 차감 금액

        Returns:
            float: 차감 후 잔액

        Raises:
            InsufficientCreditsError: 차감 시점의 잔액이 amount보다 적은 경우 (아무것도 차감하지 않음)
        """
        ...


class IBookingRepository(Protocol):
    """기존 예약 저장소 인터페이스"""

    def get(self, booking_id: str) -> Optional[Booking]:
        ...


class IPaymentRepository(Protocol):
    """결제 기록 저장소 인터페이스"""

    def create(self, payment: PaymentRecord) -> PaymentRecord:
        """
        결제 기록 저장

        Returns:
            PaymentRecord: id가 채워진 저장 결과
        """
        ...
