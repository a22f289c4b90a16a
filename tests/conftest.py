"""
pytest 공용 픽스처 모음

테스트 전략:
- 네트워크 호출은 requests.Session 을 MagicMock 으로 바꿔 끼워서 검증 (호출 횟수 포함)
- HTML 은 쿠팡 페이지 구조를 흉내 낸 작은 스니펫으로 충분
"""
from unittest.mock import MagicMock

import pytest

from src.models.product import NaverCredentials, RawListing

COUPANG_URL = "https://www.coupang.com/vp/products/7335597976?itemId=18766286510"


def make_response(status_code: int = 200, text: str = "", json_data=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


def make_item(title="상품", lprice="10000", mall_name="스토어", product_type="1", link=None, **extra) -> dict:
    item = {
        "title": title,
        "link": link or f"https://smartstore.naver.com/item/{lprice}",
        "image": "https://shopping-phinf.pstatic.net/main.jpg",
        "lprice": lprice,
        "hprice": "",
        "mallName": mall_name,
        "productId": "1234567890",
        "productType": product_type,
        "brand": "",
        "maker": "",
        "category1": "디지털/가전",
        "category2": "음향가전",
        "category3": "이어폰",
        "category4": "",
    }
    item.update(extra)
    return item


def make_raw(**kwargs) -> RawListing:
    return RawListing.model_validate(make_item(**kwargs))


@pytest.fixture
def session():
    """requests.Session 대역"""
    return MagicMock()


@pytest.fixture
def credentials():
    return NaverCredentials(client_id="test-id", client_secret="test-secret")


@pytest.fixture
def product_html():
    return """
    <html>
    <head>
      <title>삼성전자 갤럭시 버즈2 프로 | 쿠팡</title>
      <meta property="og:title" content="삼성전자 갤럭시 버즈2 프로, 그라파이트">
      <meta property="og:image" content="//thumbnail.coupangcdn.com/buds.jpg">
      <meta property="product:price:amount" content="189000">
    </head>
    <body>
      <div class="prod-price">
        <span class="total-price"><strong>179,000</strong>원</span>
      </div>
    </body>
    </html>
    """
