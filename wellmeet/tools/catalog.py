"""Stocked recommendation catalog keyed by party-size and budget buckets."""

import logging
from typing import Optional

from wellmeet.conversation.intent import Vibe, classify_vibe
from wellmeet.schemas.restaurant_schema import RestaurantCandidate, SlotAnswers

logger = logging.getLogger(__name__)

RESTAURANTS: dict[str, RestaurantCandidate] = {
    c.id: c
    for c in [
        RestaurantCandidate(
            id="1", name="라비올로", category="이탈리안", price_range="15-20만원",
            rating=4.5, review_count=124, location="강남구 논현동",
            rationale="데이트에 완벽한 로맨틱한 분위기로 유명해요",
        ),
        RestaurantCandidate(
            id="2", name="스시 오마카세", category="일식", price_range="18-25만원",
            rating=4.7, review_count=89, location="청담동",
            rationale="프라이빗한 공간에서 특별한 경험을 할 수 있어요",
        ),
        RestaurantCandidate(
            id="3", name="더 키친", category="프렌치", price_range="16-22만원",
            rating=4.6, review_count=156, location="청담동",
            rationale="특별한 날에 어울리는 고급스러운 분위기예요",
        ),
        RestaurantCandidate(
            id="4", name="파스타 하우스", category="이탈리안", price_range="8-12만원",
            rating=4.5, review_count=212, location="서초구 반포동",
            rationale="부담 없는 가격에 분위기까지 챙길 수 있어요",
        ),
        RestaurantCandidate(
            id="5", name="한우 스테이크", category="한식", price_range="25-30만원",
            rating=4.7, review_count=301, location="강남구 역삼동",
            rationale="넓은 룸이 있어 여럿이 편하게 즐길 수 있어요",
        ),
        RestaurantCandidate(
            id="6", name="중국집 화원", category="중식", price_range="20-28만원",
            rating=4.4, review_count=178, location="마포구 합정동",
            rationale="원형 테이블 코스로 단체 모임에 잘 맞아요",
        ),
        RestaurantCandidate(
            id="7", name="카페 드 파리", category="카페", price_range="8-10만원",
            rating=4.6, review_count=97, location="성수동",
            rationale="깔끔하고 조용해서 대화하기 좋아요",
        ),
        RestaurantCandidate(
            id="8", name="한정식 소담", category="한식", price_range="35-50만원",
            rating=4.8, review_count=64, location="종로구 삼청동",
            rationale="정갈한 코스와 독립된 방이 있어 상견례에 좋아요",
        ),
    ]
}

# Bucket pairs without an entry have no stocked match.
BUCKET_CANDIDATES: dict[tuple[str, str], tuple[str, ...]] = {
    ("2명", "8-12만원"): ("4", "7"),
    ("2명", "12-20만원"): ("1", "2", "3"),
    ("2명", "20-30만원"): ("2", "3"),
    ("4명", "20-30만원"): ("5", "6"),
    ("5명 이상", "20-30만원"): ("6",),
    ("5명 이상", "30만원 이상"): ("8", "5"),
}

VIBE_CANDIDATES: dict[Vibe, tuple[str, ...]] = {
    Vibe.ROMANTIC: ("1", "2", "3"),
    Vibe.LUXURIOUS: ("3", "8", "2"),
    Vibe.QUIET: ("7", "8"),
    Vibe.LIVELY: ("6", "5"),
    Vibe.CLASSIC: ("8", "5"),
    Vibe.MODERN: ("4", "1"),
    Vibe.CLEAN: ("7", "2"),
}


def get_candidate(candidate_id: str) -> Optional[RestaurantCandidate]:
    return RESTAURANTS.get(candidate_id)


def candidates_for_buckets(answers: SlotAnswers) -> list[RestaurantCandidate]:
    """Return the stocked candidates for the answers' bucket pair, in catalog order."""
    key = (answers.party_size or "", answers.budget or "")
    ids = BUCKET_CANDIDATES.get(key, ())
    if not ids:
        logger.debug("No stocked candidates for buckets %s", key)
    return [RESTAURANTS[i] for i in ids]


def candidates_for_text(text: str) -> list[RestaurantCandidate]:
    """Return the stocked candidates for the vibe a free-text query expresses."""
    vibe = classify_vibe(text)
    return [RESTAURANTS[i] for i in VIBE_CANDIDATES.get(vibe, ())]
