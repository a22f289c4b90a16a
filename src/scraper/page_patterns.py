"""
쿠팡 상품 페이지 HTML 에서 상품명 / 가격 / 이미지를 뽑는 매처 모음.

각 매처는 RawPage -> Optional[값] 형태의 순수 함수이고, 마크업이 깨져 있어도
예외 대신 None 을 돌려준다. 우선순위 순서대로 튜플에 담겨 있으며 처음 성공한 값을 쓴다.
"""
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, TypeVar

from bs4 import BeautifulSoup

import config

T = TypeVar("T")


@dataclass
class RawPage:
    """요청 한 번 동안만 존재하는 원본 페이지"""
    url: str
    html: str
    _soup: Optional[BeautifulSoup] = field(default=None, init=False, repr=False)

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html or "", "html.parser")
        return self._soup


def _meta_content(page: RawPage, prop: str) -> Optional[str]:
    tag = page.soup.find("meta", attrs={"property": prop})
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def _to_price(raw: Optional[str]) -> Optional[int]:
    """'12,900' -> 12900. 숫자가 아니거나 0 이하면 None"""
    if not raw:
        return None
    digits = raw.replace(",", "").strip()
    try:
        value = int(float(digits))
    except (ValueError, OverflowError):
        return None
    return value if value > 0 else None


# ---------------------------------------------------------
# 상품명
# ---------------------------------------------------------
def name_from_og_title(page: RawPage) -> Optional[str]:
    return _meta_content(page, "og:title")


def name_from_title_tag(page: RawPage) -> Optional[str]:
    title = page.soup.title
    if title is None:
        return None
    name = title.get_text().replace(config.REFERENCE_MARKETPLACE["TITLE_SUFFIX"], "").strip()
    return name or None


# ---------------------------------------------------------
# 가격
# ---------------------------------------------------------
def price_from_total_price(page: RawPage) -> Optional[int]:
    # <span class="total-price"><strong>12,900</strong>원</span>
    strong = page.soup.select_one("span.total-price > strong")
    if strong is None:
        return None
    return _to_price(strong.get_text(strip=True))


def price_from_meta(page: RawPage) -> Optional[int]:
    return _to_price(_meta_content(page, "product:price:amount"))


_SALE_PRICE_BLOCK = re.compile(r'class="prod-sale-price"[^>]*>.*?([0-9,]+)원', re.S)


def price_from_sale_price_block(page: RawPage) -> Optional[int]:
    match = _SALE_PRICE_BLOCK.search(page.html or "")
    if not match:
        return None
    return _to_price(match.group(1))


_SALE_PRICE_JSON = re.compile(r'"salePrice"\s*:\s*([0-9]+)')


def price_from_embedded_json(page: RawPage) -> Optional[int]:
    match = _SALE_PRICE_JSON.search(page.html or "")
    if not match:
        return None
    return _to_price(match.group(1))


# ---------------------------------------------------------
# 이미지
# ---------------------------------------------------------
def image_from_og_image(page: RawPage) -> Optional[str]:
    return _meta_content(page, "og:image")


NAME_MATCHERS = (
    name_from_og_title,
    name_from_title_tag,
)

PRICE_MATCHERS = (
    price_from_total_price,
    price_from_meta,
    price_from_sale_price_block,
    price_from_embedded_json,
)

IMAGE_MATCHERS = (
    image_from_og_image,
)


def first_match(page: RawPage, matchers: Sequence[Callable[[RawPage], Optional[T]]]) -> Optional[T]:
    """우선순위대로 매처를 돌려 처음 값이 나온 결과를 반환"""
    for matcher in matchers:
        value = matcher(page)
        if value:
            return value
    return None
