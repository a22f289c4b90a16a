import logging
from typing import Optional, Tuple

from pydantic import ValidationError

from src.extractor.query_builder import build_search_query
from src.models.errors import InternalError, InvalidInputError, PangError
from src.models.product import ExtractedProduct, RankedResultSet, SearchQuery
from src.ranker.listing_ranker import rank_results
from src.scraper.naver_shopping_client import NaverShoppingClient
from src.scraper.product_fetcher import CoupangProductFetcher

logger = logging.getLogger(__name__)


class PriceSearchService:
    """
    검색어(+기준 가격)로 네이버 쇼핑을 한 번 조회하고, 쿠팡보다 싼 대안을 정렬해 돌려준다.
    """

    def __init__(self, client: NaverShoppingClient):
        self.client = client

    def search(self, query: SearchQuery) -> RankedResultSet:
        try:
            response = self.client.search(query.text)
            return rank_results(query, response.total, response.items)
        except PangError:
            raise
        except Exception as e:
            logger.exception(f"검색 처리 중 예기치 못한 오류: {query.text}")
            raise InternalError("Internal server error") from e

    def search_text(self, text: str, reference_price: Optional[int] = None) -> RankedResultSet:
        try:
            query = SearchQuery(text=text or "", reference_price=reference_price)
        except ValidationError as e:
            raise InvalidInputError.from_validation(e) from e
        return self.search(query)

    def compare(self, url: str, fetcher: CoupangProductFetcher) -> Tuple[ExtractedProduct, RankedResultSet]:
        """
        쿠팡 URL -> 상품 추출 -> 검색어 정리 -> 쿠팡 가격을 기준으로 검색.
        """
        product = fetcher.extract(url)
        keyword = build_search_query(product.name)
        logger.info(f">>> '{keyword}' 키워드로 최저가 검색 (기준가 {product.price})")
        return product, self.search_text(keyword, reference_price=product.price)
