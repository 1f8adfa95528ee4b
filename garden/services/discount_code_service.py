"""
할인 코드 검증 서비스 (DiscountCodeService)

역할:
    - 입력 코드 정규화 (앞뒤 공백 제거 + 대문자)
    - 존재/활성 여부 확인 후 AppliedDiscount 반환

Rationale:
    가격 엔진은 검증이 끝난 AppliedDiscount만 받습니다.
    "없는 코드"와 "비활성 코드"는 서로 다른 에러로 구분하여 사용자에게 안내합니다.

실행: pytest tests/services/test_discount_code_service.py -v
"""
import logging
from typing import Optional

from garden.exception.service.discount_code_exception import (
    DiscountCodeEmptyError,
    DiscountCodeInactiveError,
    DiscountCodeInvalidError,
)
from garden.models.dto import AppliedDiscount
from garden.repositories.base import IDiscountCodeRepository

logger = logging.getLogger("garden")


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


class DiscountCodeService:
    def __init__(self, repository: IDiscountCodeRepository):
        self.repository = repository

    def validate(self, code: Optional[str]) -> AppliedDiscount:
        """
        Validate a user-entered discount code.

        Returns:
            AppliedDiscount: The code with its percentage and target. A missing or unknown
            `applies_to` becomes "total".

        Raises:
            DiscountCodeEmptyError: If the code is blank.
            DiscountCodeInvalidError: If no such code exists.
            DiscountCodeInactiveError: If the code exists but is no longer active.
        """
        normalized = normalize_code(code)
        if not normalized:
            raise DiscountCodeEmptyError()

        record = self.repository.find_by_code(normalized)
        if record is None:
            logger.warning({"event": "discount_code_rejected", "code": normalized, "reason": "not_found"})
            raise DiscountCodeInvalidError()
        if not record.is_active:
            logger.warning({"event": "discount_code_rejected", "code": normalized, "reason": "inactive"})
            raise DiscountCodeInactiveError()

        return AppliedDiscount(
            code=record.code,
            percentage_discount=record.percentage_discount,
            applies_to=record.applies_to or "total",
        )

    def resolve(self, code: Optional[str]) -> Optional[AppliedDiscount]:
        """빈 코드는 '할인 없음'으로 취급하고, 값이 있으면 검증"""
        if not normalize_code(code):
            return None
        return self.validate(code)
