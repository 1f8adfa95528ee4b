from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from garden.api.bookings import router as bookings_router
from garden.api.credits import router as credits_router
from garden.api.discount_codes import router as discount_codes_router
from garden.api.pricing import router as pricing_router
from garden.core.config import ALLOWED_ORIGINS
from garden.core.limiter import limiter
from garden.core.logging_config import setup_logging
from garden.core.middleware import CacheControlMiddleware, TraceIDMiddleware
from garden.exception.base_exception import BaseCustomException
from garden.exception.envelope_handlers import (
    custom_exception_handler,
    global_exception_handler_envelope,
    http_exception_handler,
    rate_limit_exception_handler,
    validation_exception_handler,
)

app = FastAPI(title="The Garden Pricing API")

# Rate Limiter (slowapi는 app.state.limiter를 참조)
app.state.limiter = limiter


@app.get("/ping")
def ping():
    return {"ok": True}


# CORS 설정 (환경변수 기반)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Trace-ID"],
)
app.add_middleware(CacheControlMiddleware)
# 마지막에 추가된 미들웨어가 가장 바깥에서 실행되므로 Trace ID가 모든 로그에 붙음
app.add_middleware(TraceIDMiddleware)

# API 라우터 포함
app.include_router(pricing_router)
app.include_router(discount_codes_router)
app.include_router(credits_router)
app.include_router(bookings_router)

# 커스텀 예외 핸들러는 라우터 포함 이후에 추가
app.add_exception_handler(BaseCustomException, custom_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
app.add_exception_handler(Exception, global_exception_handler_envelope)

# 로깅 설정(콘솔 + 일자별 파일 로테이션, JSON 포맷)
setup_logging()
