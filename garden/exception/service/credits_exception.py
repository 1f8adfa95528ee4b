from garden.exception.base_exception import BaseCustomException, ErrorCode

class InsufficientCreditsError(BaseCustomException):
    """차감 시점의 잔액이 정산된 크레딧보다 적음 (동시 예약 등으로 잔액이 줄어든 경우)"""
    error_code = ErrorCode.CREDITS_INSUFFICIENT
    message = "Not enough credits to complete this booking. Please try again."
    status_code = 409
