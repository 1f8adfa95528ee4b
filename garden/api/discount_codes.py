from fastapi import APIRouter, Depends, Request

from garden.api.dependencies import get_discount_code_service
from garden.core.config import RATE_LIMIT_PER_MINUTE
from garden.core.limiter import limiter
from garden.core.response import ApiResponse, success_response
from garden.models.dto import AppliedDiscount, DiscountCodeRequest
from garden.services.discount_code_service import DiscountCodeService

router = APIRouter(
    prefix="/api/discount-codes",
    tags=["Discount Codes"],
)


@router.post("/validate", response_model=ApiResponse[AppliedDiscount])
@limiter.limit(f"{RATE_LIMIT_PER_MINUTE}/minute")
def validate_discount_code(
    request: Request,
    req: DiscountCodeRequest,
    service: DiscountCodeService = Depends(get_discount_code_service),
):
    """
    할인 코드 검증 (IP당 분당 RATE_LIMIT_PER_MINUTE회)

    Returns:
        200 OK: 코드, 할인율, 적용 대상
        400: 빈 코드 / 존재하지 않는 코드 / 비활성 코드
        429: 요청 횟수 초과
    """
    return success_response(result=service.validate(req.code))
