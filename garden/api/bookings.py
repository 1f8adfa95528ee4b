from fastapi import APIRouter, Depends, Request

from garden.api.dependencies import get_booking_service, validate_user_id
from garden.core.config import QUOTE_RATE_LIMIT_PER_MINUTE
from garden.core.limiter import limiter
from garden.core.response import ApiResponse, success_response
from garden.models.dto import BookingConfirmation, BookingConfirmRequest
from garden.services.booking_service import BookingService

router = APIRouter(
    prefix="/api/bookings",
    tags=["Bookings"],
)


@router.post("/confirm", response_model=ApiResponse[BookingConfirmation])
@limiter.limit(f"{QUOTE_RATE_LIMIT_PER_MINUTE}/minute")
def confirm_booking(
    request: Request,
    req: BookingConfirmRequest,
    user_id: str = Depends(validate_user_id),
    service: BookingService = Depends(get_booking_service),
):
    """
    예약 확정: 서버에서 가격 재계산 → 크레딧 정산 → 결제 기록 저장

    - **Header(X-User-Id)**: 사용자 식별 ID (UUID 형식 필수)

    Returns:
        200 OK: requiresPayment=False면 크레딧만으로 결제 완료
        400: 연장 대상 예약과 다른 숙소
        404: 숙소 또는 (본인의) 연장 대상 예약 없음
        409: 같은 예약 확정이 이미 처리 중이거나 크레딧 잔액 부족
        429: 요청 횟수 초과
    """
    return success_response(result=service.confirm(user_id, req))
