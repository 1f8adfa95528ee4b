import os
from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "production")
IS_DEBUG = APP_ENV == "development"

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "5"))
# 할인 코드를 함께 받는 견적/확정 API의 분당 요청 한도 (코드 무차별 대입 방지, 슬라이더 조작은 허용)
QUOTE_RATE_LIMIT_PER_MINUTE = int(os.getenv("QUOTE_RATE_LIMIT_PER_MINUTE", "60"))

# 부가세율 (기본 24%)
VAT_RATE = float(os.getenv("VAT_RATE", "0.24"))

# 크레딧 차감 후 남은 금액이 이 값 미만이면 결제 게이트웨이를 건너뜀 (EUR)
CREDITS_ONLY_THRESHOLD = float(os.getenv("CREDITS_ONLY_THRESHOLD", "0.50"))

_DEFAULT_DURATION_DISCOUNT_STEPS = "2:0.08,4:0.18,8:0.25"


def _parse_duration_steps(value: str | None) -> list[tuple[int, float]]:
    """
    Parse "weeks:fraction" pairs separated by commas into a list of steps.

    Example:
        "2:0.08,4:0.18" -> [(2, 0.08), (4, 0.18)]
    """
    if not value:
        return []
    steps = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        weeks, fraction = item.split(":")
        steps.append((int(weeks), float(fraction)))
    return steps


def _parse_fixed_range(value: str | None) -> tuple[int, int, int] | None:
    """"min:max:default" 형식의 프로모션 고정 범위 파싱. 비어있으면 None."""
    if not value:
        return None
    low, high, default = (int(part) for part in value.split(":"))
    return low, high, default


DURATION_DISCOUNT_STEPS = _parse_duration_steps(
    os.getenv("DURATION_DISCOUNT_STEPS", _DEFAULT_DURATION_DISCOUNT_STEPS)
)

FOOD_RANGE_FIXED = _parse_fixed_range(os.getenv("FOOD_RANGE_FIXED", "390:3600:390"))


# CORS 허용 오리진 (환경변수 기반)
def _parse_origins(value: str | None) -> list[str]:
    if not value:
        return []
    normalized = value.replace("\n", ",").replace(";", ",")
    items = [item.strip() for item in normalized.split(",")]
    return [item for item in items if item]

_DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

# 우선순위: CORS_ALLOWED_ORIGINS(복수) > FRONTEND_ORIGINS(복수) > FRONTEND_URL(단일)
_cors_allowed_origins = _parse_origins(os.getenv("CORS_ALLOWED_ORIGINS"))
_frontend_origins = _parse_origins(os.getenv("FRONTEND_ORIGINS"))
_single_frontend_url = [os.getenv("FRONTEND_URL")] if os.getenv("FRONTEND_URL") else []

ALLOWED_ORIGINS = list(dict.fromkeys(_DEFAULT_ALLOWED_ORIGINS + _cors_allowed_origins + _frontend_origins + _single_frontend_url))
