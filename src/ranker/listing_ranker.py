"""
네이버 쇼핑 검색 결과 정규화 + 쿠팡 상품 제외 + 가격대 필터 + 정렬.
모두 상태 없는 함수라 요청마다 그대로 호출하면 된다.
"""
import logging
import re
from typing import Iterable, List, Optional, Tuple

import config
from src.models.product import NormalizedListing, RankedResultSet, RawListing, SearchQuery

logger = logging.getLogger(__name__)

CATALOG_PRODUCT_TYPE = "1"
CATEGORY_SEPARATOR = " > "

_TAG = re.compile(r"<[^>]*>")

PriceBand = Tuple[Optional[int], Optional[int]]


def strip_markup(title: str) -> str:
    """'<b>무선</b> 이어폰' -> '무선 이어폰'. 엔티티 해석 없이 태그만 지운다."""
    return _TAG.sub("", title or "")


def _to_int(raw: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def normalize_listing(raw: RawListing) -> NormalizedListing:
    categories = [raw.category1, raw.category2, raw.category3, raw.category4]
    return NormalizedListing(
        title=strip_markup(raw.title),
        link=raw.link,
        image=raw.image,
        price=_to_int(raw.lprice),
        mall_name=raw.mall_name,
        brand=raw.brand,
        maker=raw.maker,
        category=CATEGORY_SEPARATOR.join(c for c in categories if c),
        is_catalog_match=raw.product_type == CATALOG_PRODUCT_TYPE,
    )


def is_reference_listing(listing: NormalizedListing) -> bool:
    """링크나 판매처명에 쿠팡 식별자가 들어 있으면 True"""
    link = listing.link.lower()
    mall_name = listing.mall_name.lower()
    for identifier in config.REFERENCE_MARKETPLACE["IDENTIFIERS"]:
        identifier = identifier.lower()
        if identifier in link or identifier in mall_name:
            return True
    return False


def derive_price_band(query: SearchQuery) -> Optional[PriceBand]:
    return query.price_band(config.PRICE_BAND["LOW_FACTOR"], config.PRICE_BAND["HIGH_FACTOR"])


def within_band(listing: NormalizedListing, band: Optional[PriceBand]) -> bool:
    if band is None:
        return True
    low, high = band
    if low is not None and listing.price < low:
        return False
    if high is not None and listing.price > high:
        return False
    return True


def rank_listings(listings: Iterable[NormalizedListing]) -> List[NormalizedListing]:
    """
    카탈로그 상품 먼저, 그다음 개별 판매자 상품. 그룹 안에서는 가격 오름차순.
    sorted 는 안정 정렬이라 같은 가격이면 API 가 준 순서가 유지된다.
    """
    listings = list(listings)
    catalog = sorted((item for item in listings if item.is_catalog_match), key=lambda item: item.price)
    individual = sorted((item for item in listings if not item.is_catalog_match), key=lambda item: item.price)
    return catalog + individual


def rank_results(query: SearchQuery, total: int, raw_items: Iterable[RawListing]) -> RankedResultSet:
    normalized = [normalize_listing(raw) for raw in raw_items]

    alternatives = [item for item in normalized if not is_reference_listing(item)]
    excluded = len(normalized) - len(alternatives)

    band = derive_price_band(query)
    in_band = [item for item in alternatives if within_band(item, band)]

    ranked = rank_listings(in_band)
    catalog_count = sum(1 for item in ranked if item.is_catalog_match)

    logger.info(
        f"'{query.text}' 결과 정리: {len(normalized)}건 -> 쿠팡 제외 {excluded}건, "
        f"가격대 {band} 밖 {len(alternatives) - len(in_band)}건 -> 최종 {len(ranked)}건 (카탈로그 {catalog_count})"
    )

    return RankedResultSet(
        total_available=total,
        catalog_count=catalog_count,
        listings=ranked,
        reference_price=query.reference_price,
    )
