import logging
from typing import Optional
from urllib.parse import urlparse

import requests

import config
from src.models.errors import (
    DomainMismatchError,
    InternalError,
    InvalidInputError,
    PangError,
    UnparseableContentError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
)
from src.models.product import ExtractedProduct
from src.scraper.page_patterns import (
    IMAGE_MATCHERS,
    NAME_MATCHERS,
    PRICE_MATCHERS,
    RawPage,
    first_match,
)

logger = logging.getLogger(__name__)


def is_reference_marketplace_url(url: str) -> bool:
    """coupang.com 또는 그 하위 도메인의 http(s) URL 인지 확인"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    host = (parsed.hostname or "").lower()
    domain = config.REFERENCE_MARKETPLACE["DOMAIN"]
    return host == domain or host.endswith("." + domain)


class CoupangProductFetcher:
    """
    쿠팡 상품 URL 에서 상품명, 가격, 대표 이미지를 추출하는 클래스.
    페이지는 한 번만 GET 하고, 파싱은 page_patterns 의 매처들을 우선순위대로 시도한다.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = config.TIMEOUTS["PAGE_FETCH"]):
        # 세션을 주입하지 않으면 requests.get 으로 호출 (요청마다 연결을 바로 정리)
        self.session = session
        self.timeout = timeout

    def extract(self, url: str) -> ExtractedProduct:
        """
        Returns: ExtractedProduct (가격/이미지는 못 찾으면 None)
        Raises: PangError 하위 예외
        """
        url = (url or "").strip()
        if not url:
            raise InvalidInputError("url parameter is required")

        # 네트워크 접근 전에 도메인부터 확인
        if not is_reference_marketplace_url(url):
            raise DomainMismatchError()

        try:
            page = self._fetch(url)
            return self.parse(page)
        except PangError:
            raise
        except Exception as e:
            logger.exception(f"상품 정보 추출 중 예기치 못한 오류: {url}")
            raise InternalError("상품 정보를 가져오는 중 오류가 발생했습니다") from e

    def _fetch(self, url: str) -> RawPage:
        logger.info(f"쿠팡 페이지 요청: {url}")
        try:
            response = (self.session or requests).get(
                url,
                headers=config.HEADERS["PAGE"],
                timeout=self.timeout,
                allow_redirects=True,
            )
        except requests.Timeout as e:
            raise UpstreamUnreachableError(f"쿠팡 페이지 응답 시간 초과 ({self.timeout}초)") from e
        except requests.RequestException as e:
            raise UpstreamUnreachableError("쿠팡 페이지에 연결할 수 없습니다") from e

        if not response.ok:
            logger.warning(f"쿠팡 페이지 응답 실패: HTTP {response.status_code}")
            raise UpstreamRejectedError("쿠팡 페이지를 불러올 수 없습니다", upstream_status=response.status_code)

        return RawPage(url=url, html=response.text)

    @staticmethod
    def parse(page: RawPage) -> ExtractedProduct:
        """
        상품명은 필수, 가격과 이미지는 선택. 상품명이 없으면 UnparseableContentError.
        """
        name = first_match(page, NAME_MATCHERS)
        if not name:
            logger.warning(f"상품명을 찾지 못했습니다: {page.url}")
            raise UnparseableContentError()

        price = first_match(page, PRICE_MATCHERS)
        image = first_match(page, IMAGE_MATCHERS)

        if price is None:
            logger.info("가격 패턴 매칭 실패 (상품명만 반환)")
        logger.info(f"Title found: {name} / {price}원")

        return ExtractedProduct(name=name, price=price, image_url=image, source_url=page.url)
