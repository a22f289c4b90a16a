import math
from decimal import Decimal
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator


class ExtractedProduct(BaseModel):
    """
    쿠팡 상품 페이지에서 추출한 상품 정보
    """
    name: str = Field(..., description="상품명 (검색어의 원천, 필수)")
    price: Optional[int] = Field(None, description="판매가 (원, 못 찾으면 None)")
    image_url: Optional[str] = Field(None, description="대표 이미지 URL (og:image)")
    source_url: str = Field(..., description="요청한 상품 페이지 URL")

    class Config:
        frozen = True  # 불변 객체로 설정

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v


class SearchQuery(BaseModel):
    """
    최저가 검색 요청.
    reference_price 가 있으면 가격대 필터를 만들고, min/max 가 주어지면 해당 경계를 덮어쓴다.
    """
    text: str = Field(..., description="검색어")
    reference_price: Optional[int] = Field(None, description="기준 가격 (쿠팡 가격)")
    min_price: Optional[int] = Field(None, description="직접 지정한 최저가 경계")
    max_price: Optional[int] = Field(None, description="직접 지정한 최고가 경계")

    class Config:
        frozen = True

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query text must not be empty")
        return v

    @field_validator("reference_price", "min_price", "max_price")
    @classmethod
    def _price_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("price must be a positive integer")
        return v

    @model_validator(mode="after")
    def _bounds_in_order(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self

    def price_band(self, low_factor, high_factor) -> Optional[Tuple[Optional[int], Optional[int]]]:
        """
        (low, high) 양끝 포함 가격대. 필터가 없으면 None.
        Decimal 로 계산해서 floor(100000 * 0.3) 같은 값이 부동소수점 오차로 어긋나지 않게 한다.
        """
        low = high = None
        if self.reference_price is not None:
            p = Decimal(self.reference_price)
            low = math.floor(p * Decimal(str(low_factor)))
            high = math.floor(p * Decimal(str(high_factor)))
        if self.min_price is not None:
            low = self.min_price
        if self.max_price is not None:
            high = self.max_price

        if low is None and high is None:
            return None
        return low, high


class NaverCredentials(BaseModel):
    """네이버 검색 API 인증 정보 (생성 시 명시적으로 주입)"""
    client_id: str
    client_secret: SecretStr  # repr / model_dump 에 노출되지 않음

    class Config:
        frozen = True


class RawListing(BaseModel):
    """
    네이버 쇼핑 검색 API 의 items[] 원본 레코드
    """
    title: str = ""
    link: str = ""
    image: str = ""
    lprice: str = ""
    hprice: str = ""
    mall_name: str = Field("", alias="mallName")
    product_id: str = Field("", alias="productId")
    product_type: str = Field("", alias="productType")
    brand: str = ""
    maker: str = ""
    category1: str = ""
    category2: str = ""
    category3: str = ""
    category4: str = ""

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_str(cls, v):
        # API 가 null 이나 숫자를 줄 때도 문자열로 받는다
        if v is None:
            return ""
        return str(v)


class NormalizedListing(BaseModel):
    """
    정규화된 검색 결과 한 건
    """
    title: str = Field(..., description="태그를 제거한 상품명")
    link: str = Field(..., description="상품 링크")
    image: str = Field("", description="상품 이미지 URL")
    price: int = Field(..., description="최저가 (원)")
    mall_name: str = Field("", description="판매처명")
    brand: str = Field("", description="브랜드")
    maker: str = Field("", description="제조사")
    category: str = Field("", description="카테고리 (' > ' 로 연결)")
    is_catalog_match: bool = Field(False, description="가격비교 카탈로그 상품 여부 (productType == '1')")

    class Config:
        frozen = True


class RankedResultSet(BaseModel):
    """
    한 번의 검색 요청에 대한 최종 결과
    """
    total_available: int = Field(..., description="필터링 전 API 가 보고한 전체 결과 수")
    catalog_count: int = Field(..., description="필터링 후 카탈로그 상품 수")
    listings: List[NormalizedListing] = Field(default_factory=list)
    reference_price: Optional[int] = Field(None, description="절약 금액 계산용 기준 가격")

    class Config:
        frozen = True

    def savings(self, listing: NormalizedListing) -> Optional[int]:
        """기준 가격보다 싼 만큼의 금액. 비싸거나 같으면 None."""
        if not self.reference_price:
            return None
        diff = self.reference_price - listing.price
        return diff if diff > 0 else None

    @property
    def cheapest(self) -> Optional[NormalizedListing]:
        if not self.listings:
            return None
        return min(self.listings, key=lambda item: item.price)

    @property
    def best_savings(self) -> Optional[int]:
        candidates = [s for s in (self.savings(item) for item in self.listings) if s]
        return max(candidates) if candidates else None
