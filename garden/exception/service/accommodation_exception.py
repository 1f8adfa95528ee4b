from garden.exception.base_exception import BaseCustomException, ErrorCode

class AccommodationNotFoundError(BaseCustomException):
    """숙소 데이터 조회 실패"""
    error_code = ErrorCode.ACCOMMODATION_NOT_FOUND
    message = "Accommodation not found."
    status_code = 404
