import logging
from typing import List, Optional

import requests
from pydantic import BaseModel, Field, ValidationError

import config
from src.models.errors import UpstreamRejectedError, UpstreamUnreachableError
from src.models.product import NaverCredentials, RawListing

logger = logging.getLogger(__name__)


class ProviderResponse(BaseModel):
    """네이버 쇼핑 검색 API 응답 (필요한 필드만)"""
    total: int = Field(0, description="API 가 보고한 전체 결과 수")
    items: List[RawListing] = Field(default_factory=list)

    class Config:
        frozen = True


class NaverShoppingClient:
    """
    네이버 쇼핑 검색 오픈 API 호출 클래스.
    결과 순서는 유사도순(sort=sim)으로 받되, 최종 정렬은 ranker 가 다시 한다.
    """
    BASE_URL = config.URLS["NAVER_SHOPPING_API"]

    def __init__(
        self,
        credentials: NaverCredentials,
        session: Optional[requests.Session] = None,
        timeout: float = config.TIMEOUTS["SEARCH"],
    ):
        self.credentials = credentials
        # 세션을 주입하지 않으면 requests.get 으로 호출 (요청마다 연결을 바로 정리)
        self.session = session
        self.timeout = timeout

    def search(self, text: str) -> ProviderResponse:
        logger.info(f"검색 시작: {text}")
        headers = {
            "X-Naver-Client-Id": self.credentials.client_id,
            "X-Naver-Client-Secret": self.credentials.client_secret.get_secret_value(),
        }
        params = {
            "query": text,
            "display": config.SEARCH_SETTINGS["DISPLAY"],
            "sort": config.SEARCH_SETTINGS["SORT"],
        }

        try:
            response = (self.session or requests).get(self.BASE_URL, headers=headers, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            raise UpstreamUnreachableError(f"네이버 API 응답 시간 초과 ({self.timeout}초)") from e
        except requests.RequestException as e:
            raise UpstreamUnreachableError("네이버 API 에 연결할 수 없습니다") from e

        if not response.ok:
            unauthorized = response.status_code == 401
            logger.warning(f"네이버 API 오류: HTTP {response.status_code}")
            raise UpstreamRejectedError(
                "Naver API error",
                upstream_status=response.status_code,
                unauthorized=unauthorized,
            )

        try:
            data = response.json()
            result = ProviderResponse.model_validate(data)
        except (ValueError, ValidationError) as e:
            raise UpstreamRejectedError("네이버 API 응답을 해석할 수 없습니다", upstream_status=response.status_code) from e

        logger.info(f"JSON 데이터 확인: total={result.total}, {len(result.items)}개 아이템")
        return result
