import os
from dotenv import load_dotenv

from src.models.errors import ConfigurationError
from src.models.product import NaverCredentials

# URLs
URLS = {
    "NAVER_SHOPPING_API": "https://openapi.naver.com/v1/search/shop.json",
}

# Reference Marketplace (쿠팡)
REFERENCE_MARKETPLACE = {
    "DOMAIN": "coupang.com",
    "TITLE_SUFFIX": " | 쿠팡",
    # 링크 또는 판매처명에 포함되면 쿠팡 자체 상품으로 보고 제외
    "IDENTIFIERS": ["coupang", "쿠팡"],
}

# Request Headers
HEADERS = {
    "PAGE": {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept-Language": "ko-KR,ko;q=0.9",
    },
}

# Timeouts (Seconds)
TIMEOUTS = {
    "PAGE_FETCH": 10.0,
    "SEARCH": 10.0,
}

# Naver Shopping Search Settings
SEARCH_SETTINGS = {
    "DISPLAY": 20,
    "SORT": "sim",  # 네이버 유사도순 (최종 정렬은 직접 수행)
}

# 기준 가격 대비 허용 가격대 (floor(p * LOW) ~ floor(p * HIGH), 양끝 포함)
PRICE_BAND = {
    "LOW_FACTOR": "0.3",
    "HIGH_FACTOR": "1.2",
}

# Naver API Credentials
NAVER_API_CONFIG = {
    "CLIENT_ID_ENV": "NAVER_CLIENT_ID",
    "CLIENT_SECRET_ENV": "NAVER_CLIENT_SECRET",
}


def load_naver_credentials() -> NaverCredentials:
    """
    환경변수(.env 포함)에서 네이버 API 인증 정보를 읽어온다.
    둘 중 하나라도 없으면 ConfigurationError.
    """
    load_dotenv()

    client_id = os.getenv(NAVER_API_CONFIG["CLIENT_ID_ENV"])
    client_secret = os.getenv(NAVER_API_CONFIG["CLIENT_SECRET_ENV"])
    if not client_id or not client_secret:
        raise ConfigurationError("Naver API credentials not configured")

    return NaverCredentials(client_id=client_id, client_secret=client_secret)
