"""
금액 반올림 헬퍼

모든 금액 확정 지점에서 동일한 반올림 규칙(ROUND_HALF_UP)을 사용합니다.
float를 repr 문자열로 Decimal 변환하여 0.1 + 0.2 같은 이진 표현 오차가
센트 단위 차이로 번지지 않도록 합니다.
"""
from decimal import Decimal, ROUND_HALF_UP

_CENT = Decimal("0.01")
_TENTH = Decimal("0.1")
_UNIT = Decimal("1")


def _quantize(value: float, exp: Decimal) -> Decimal:
    return Decimal(repr(float(value))).quantize(exp, rounding=ROUND_HALF_UP)


def round2(value: float) -> float:
    """통화 정밀도(소수 둘째 자리)로 반올림"""
    return float(_quantize(value, _CENT))


def round1(value: float) -> float:
    """소수 첫째 자리로 반올림 (화면 표시용 주 수)"""
    return float(_quantize(value, _TENTH))


def round_unit(value: float) -> int:
    """가장 가까운 정수 통화 단위로 반올림 (슬라이더 주간 금액)"""
    return int(_quantize(value, _UNIT))
