"""
Flask HTTP 경계 테스트
"""
from unittest.mock import MagicMock

import pytest

from main import create_app
from src.models.errors import ConfigurationError, UpstreamRejectedError, UpstreamUnreachableError
from src.models.product import ExtractedProduct, NormalizedListing, RankedResultSet
from src.scraper.product_fetcher import CoupangProductFetcher
from tests.conftest import COUPANG_URL, make_response


@pytest.fixture
def search_service():
    service = MagicMock()
    service.search.return_value = RankedResultSet(
        total_available=100,
        catalog_count=1,
        listings=[
            NormalizedListing(title="이어폰", link="https://a", price=30000, mall_name="A몰", is_catalog_match=True),
            NormalizedListing(title="이어폰2", link="https://b", price=45000, mall_name="B몰"),
        ],
        reference_price=40000,
    )
    return service


@pytest.fixture
def client(session, search_service):
    app = create_app(
        fetcher_factory=lambda: CoupangProductFetcher(session=session),
        service_factory=lambda: search_service,
    )
    app.config["TESTING"] = True
    return app.test_client()


class TestParseCoupang:
    def test_success(self, client, session, product_html):
        session.get.return_value = make_response(text=product_html)

        response = client.get("/api/parse-coupang", query_string={"url": COUPANG_URL})

        assert response.status_code == 200
        assert response.get_json() == {
            "productName": "삼성전자 갤럭시 버즈2 프로, 그라파이트",
            "price": 179000,
            "image": "//thumbnail.coupangcdn.com/buds.jpg",
            "url": COUPANG_URL,
        }

    def test_missing_url(self, client):
        response = client.get("/api/parse-coupang")
        assert response.status_code == 400
        assert response.get_json()["kind"] == "invalid_input"

    def test_wrong_domain(self, client, session):
        response = client.get("/api/parse-coupang", query_string={"url": "https://www.gmarket.co.kr/item/1"})

        assert response.status_code == 400
        assert response.get_json()["kind"] == "domain_mismatch"
        assert session.get.call_count == 0

    def test_unparseable(self, client, session):
        session.get.return_value = make_response(text="<html><body>no product</body></html>")

        response = client.get("/api/parse-coupang", query_string={"url": COUPANG_URL})

        assert response.status_code == 422
        assert response.get_json()["error"]

    def test_page_unreachable(self, client, session):
        session.get.return_value = make_response(status_code=404)

        response = client.get("/api/parse-coupang", query_string={"url": COUPANG_URL})

        assert response.status_code == 502
        assert response.get_json()["kind"] == "upstream_rejected"


class TestSearch:
    def test_success(self, client, search_service):
        response = client.get("/api/search", query_string={"query": "무선 이어폰", "referencePrice": "40000"})

        assert response.status_code == 200
        body = response.get_json()
        assert body["total"] == 100
        assert body["catalogCount"] == 1
        assert body["bestSavings"] == 10000
        assert [r["price"] for r in body["results"]] == [30000, 45000]
        assert body["results"][0]["isCatalogMatch"] is True
        assert body["results"][0]["mallName"] == "A몰"
        assert body["results"][0]["savings"] == 10000
        assert body["results"][1]["savings"] is None

        query = search_service.search.call_args[0][0]
        assert query.text == "무선 이어폰"
        assert query.reference_price == 40000

    def test_explicit_min_max(self, client, search_service):
        client.get("/api/search", query_string={"query": "이어폰", "minPrice": "1000", "maxPrice": "5000"})

        query = search_service.search.call_args[0][0]
        assert (query.min_price, query.max_price, query.reference_price) == (1000, 5000, None)

    def test_missing_query(self, client, search_service):
        response = client.get("/api/search")

        assert response.status_code == 400
        search_service.search.assert_not_called()

    def test_bad_price_param(self, client):
        response = client.get("/api/search", query_string={"query": "이어폰", "referencePrice": "abc"})
        assert response.status_code == 400

    @pytest.mark.parametrize("params", [
        {"referencePrice": "0"},
        {"referencePrice": "-5000"},
        {"minPrice": "9000", "maxPrice": "1000"},
    ])
    def test_impossible_price_band_is_rejected(self, client, search_service, params):
        response = client.get("/api/search", query_string={"query": "이어폰", **params})

        assert response.status_code == 400
        body = response.get_json()
        assert body["kind"] == "invalid_input"
        assert body["error"]
        search_service.search.assert_not_called()

    def test_missing_credentials(self, session):
        def no_credentials():
            raise ConfigurationError("Naver API credentials not configured")

        app = create_app(service_factory=no_credentials)
        response = app.test_client().get("/api/search", query_string={"query": "이어폰"})

        assert response.status_code == 500
        assert response.get_json() == {
            "error": "Naver API credentials not configured",
            "kind": "configuration_error",
        }

    def test_provider_unauthorized(self, client, search_service):
        search_service.search.side_effect = UpstreamRejectedError("Naver API error", upstream_status=401, unauthorized=True)

        response = client.get("/api/search", query_string={"query": "이어폰"})

        assert response.status_code == 401

    def test_provider_unreachable(self, client, search_service):
        search_service.search.side_effect = UpstreamUnreachableError()

        response = client.get("/api/search", query_string={"query": "이어폰"})

        assert response.status_code == 502
        assert response.get_json()["kind"] == "upstream_unreachable"

    def test_unexpected_error_is_captured(self, client, search_service):
        search_service.search.side_effect = RuntimeError("boom")

        response = client.get("/api/search", query_string={"query": "이어폰"})

        assert response.status_code == 500
        assert response.get_json()["kind"] == "internal_error"


class TestCompare:
    def test_success(self, client, search_service):
        product = ExtractedProduct(name="무선 이어폰", price=40000, source_url=COUPANG_URL)
        search_service.compare.return_value = (product, search_service.search.return_value)

        response = client.get("/api/compare", query_string={"url": COUPANG_URL})

        assert response.status_code == 200
        body = response.get_json()
        assert body["product"]["productName"] == "무선 이어폰"
        assert body["search"]["catalogCount"] == 1

    def test_missing_url(self, client):
        assert client.get("/api/compare").status_code == 400


def test_unknown_route_is_404(client):
    assert client.get("/api/nope").status_code == 404
