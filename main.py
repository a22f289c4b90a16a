import logging
from typing import Callable, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

import config
from src.models.errors import InternalError, InvalidInputError, PangError
from src.models.product import ExtractedProduct, RankedResultSet, SearchQuery
from src.ranker.price_search import PriceSearchService
from src.scraper.naver_shopping_client import NaverShoppingClient
from src.scraper.product_fetcher import CoupangProductFetcher

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def default_service_factory() -> PriceSearchService:
    # 인증 정보는 요청 시점에 읽는다 (없으면 ConfigurationError)
    credentials = config.load_naver_credentials()
    return PriceSearchService(NaverShoppingClient(credentials))


def product_to_dict(product: ExtractedProduct) -> dict:
    return {
        "productName": product.name,
        "price": product.price,
        "image": product.image_url,
        "url": product.source_url,
    }


def result_set_to_dict(result: RankedResultSet) -> dict:
    return {
        "total": result.total_available,
        "catalogCount": result.catalog_count,
        "bestSavings": result.best_savings,
        "results": [
            {
                "title": item.title,
                "link": item.link,
                "image": item.image,
                "price": item.price,
                "mallName": item.mall_name,
                "brand": item.brand,
                "maker": item.maker,
                "category": item.category,
                "isCatalogMatch": item.is_catalog_match,
                "savings": result.savings(item),
            }
            for item in result.listings
        ],
    }


def _optional_int(name: str) -> Optional[int]:
    raw = request.args.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidInputError(f"{name} must be an integer")


def create_app(
    fetcher_factory: Callable[[], CoupangProductFetcher] = CoupangProductFetcher,
    service_factory: Callable[[], PriceSearchService] = default_service_factory,
) -> Flask:
    """
    요청마다 fetcher / service 를 새로 만든다 (요청 간 공유 상태 없음).
    테스트에서는 factory 를 바꿔 끼운다.
    """
    app = Flask(__name__)
    CORS(app)

    @app.errorhandler(PangError)
    def handle_pang_error(e: PangError):
        logger.info(f"요청 실패 [{e.kind.value}] {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error")
        error = InternalError()
        return jsonify(error.to_dict()), error.status_code

    @app.route('/api/parse-coupang', methods=['GET'])
    def parse_coupang():
        url = request.args.get("url", "").strip()
        if not url:
            raise InvalidInputError("url parameter is required")

        product = fetcher_factory().extract(url)
        return jsonify(product_to_dict(product))

    @app.route('/api/search', methods=['GET'])
    def search():
        text = request.args.get("query", "").strip()
        if not text:
            raise InvalidInputError("query parameter is required")

        try:
            query = SearchQuery(
                text=text,
                reference_price=_optional_int("referencePrice"),
                min_price=_optional_int("minPrice"),
                max_price=_optional_int("maxPrice"),
            )
        except ValidationError as e:
            raise InvalidInputError.from_validation(e) from e

        result = service_factory().search(query)
        return jsonify(result_set_to_dict(result))

    @app.route('/api/compare', methods=['GET'])
    def compare():
        url = request.args.get("url", "").strip()
        if not url:
            raise InvalidInputError("url parameter is required")

        product, result = service_factory().compare(url, fetcher_factory())
        return jsonify({
            "product": product_to_dict(product),
            "search": result_set_to_dict(result),
        })

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=False)
