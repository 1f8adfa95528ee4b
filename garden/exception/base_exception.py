from enum import Enum

class ErrorCode(str, Enum):
    """
    애플리케이션 전반에서 사용하는 에러 코드 정의.
    형식: 카테고리(영문)-번호(3자리)
    """
    # 1. COMMON: 공통/일반 에러
    GENERIC_UNKNOWN = "GENERIC-000"
    COMMON_INTERNAL_ERROR = "COMMON-001"
    COMMON_BAD_REQUEST = "COMMON-002"
    RATE_LIMIT_EXCEEDED = "RATE-001"

    # 2. STAY: 주(week) 선택/숙박 기간 관련
    WEEK_SELECTION_INVALID = "STAY-001"

    # 3. ACCOMMODATION: 숙소 조회 관련
    ACCOMMODATION_NOT_FOUND = "ACCOMMODATION-001"

    # 4. DISCOUNT: 할인 코드 검증 관련
    DISCOUNT_CODE_EMPTY = "DISCOUNT-001"
    DISCOUNT_CODE_INVALID = "DISCOUNT-002"
    DISCOUNT_CODE_INACTIVE = "DISCOUNT-003"

    # 5. BOOKING: 예약 확정/연장 관련
    BOOKING_NOT_FOUND = "BOOKING-001"
    BOOKING_IN_PROGRESS = "BOOKING-002"
    BOOKING_ACCOMMODATION_MISMATCH = "BOOKING-003"

    # 6. CREDITS: 크레딧 차감 관련
    CREDITS_INSUFFICIENT = "CREDITS-001"


class BaseCustomException(Exception):
    """
    모든 커스텀 예외의 최상위 클래스.
    이 클래스를 상속받아 구체적인 예외를 정의해야 함.
    """
    error_code: ErrorCode = ErrorCode.GENERIC_UNKNOWN
    message: str = "An unknown error occurred."
    status_code: int = 500

    def __init__(self, message: str = None, error_code: ErrorCode = None, status_code: int = None):
        if message:
            self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)
