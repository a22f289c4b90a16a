import re

import config


def build_search_query(product_name: str) -> str:
    """
    쿠팡 상품명을 네이버 쇼핑 검색어로 정리한다.
    예: "[로켓배송] 삼성전자 갤럭시 버즈2 프로 (SM-R510), 그라파이트, 1개 | 쿠팡"
        -> "삼성전자 갤럭시 버즈2 프로"
    정리 결과가 비면 원래 상품명을 그대로 쓴다.
    """
    original = " ".join((product_name or "").split())
    title = original

    # 0. 접미사 정리
    title = title.replace(config.REFERENCE_MARKETPLACE["TITLE_SUFFIX"], "")
    title = re.sub(r' : 쿠팡.*', '', title)

    # 1. 괄호 안의 내용 제거 (대괄호 [], 소괄호 ())
    title = re.sub(r'\[.*?\]', '', title)
    title = re.sub(r'\(.*?\)', '', title)

    # 2. 옵션 (", 블랙, 1개") 제거. "1,000매" 처럼 숫자 사이 콤마는 유지
    title = re.split(r'(?<!\d),|,(?!\d)', title)[0]

    # 3. 불필요한 공백 정리
    title = " ".join(title.split())

    return title or original
