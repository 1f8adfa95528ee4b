from functools import lru_cache
from supabase import create_client, Client, ClientOptions
from garden.core.config import SUPABASE_URL, SUPABASE_KEY

@lru_cache
def get_supabase_client() -> Client:
    """
    Supabase 클라이언트 반환 (Singleton via lru_cache)

    Returns:
        Client: Supabase Client 인스턴스

    Raises:
        ValueError: SUPABASE_URL 또는 SUPABASE_KEY 환경변수가 없는 경우

    Rationale:
        - functools.lru_cache를 사용하여 Thread-safe한 싱글톤 패턴 구현
        - 모듈 import 시점이 아닌 최초 사용 시점에 생성하여, 인메모리 저장소만 쓰는
          테스트/로컬 환경에서는 Supabase 설정 없이도 앱이 기동되도록 함
    """
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")

    options = ClientOptions(
        schema="public",
        auto_refresh_token=False,  # 서버 측 호출이므로 세션 갱신 불필요
        persist_session=False,
    )

    return create_client(SUPABASE_URL, SUPABASE_KEY, options=options)
