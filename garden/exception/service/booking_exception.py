from garden.exception.base_exception import BaseCustomException, ErrorCode

class BookingNotFoundError(BaseCustomException):
    """연장 대상 예약이 존재하지 않음"""
    error_code = ErrorCode.BOOKING_NOT_FOUND
    message = "Booking not found."
    status_code = 404

class BookingInProgressError(BaseCustomException):
    """동일한 예약 확정 요청이 이미 처리 중"""
    error_code = ErrorCode.BOOKING_IN_PROGRESS
    message = "This booking is already being confirmed."
    status_code = 409

class BookingAccommodationMismatchError(BaseCustomException):
    """연장 요청의 숙소가 기존 예약의 숙소와 다름"""
    error_code = ErrorCode.BOOKING_ACCOMMODATION_MISMATCH
    message = "An extension must use the accommodation of the booking being extended."
    status_code = 400
