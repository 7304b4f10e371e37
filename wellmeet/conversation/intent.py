"""
Vibe classification for free-text recommendation requests.

The keyword table is data: each vibe lists the Korean words that signal
it, and the first vibe in table order with a matching keyword wins.
Callers receive a tagged ``Vibe`` value and never inspect the text.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class Vibe(str, Enum):
    LUXURIOUS = "LUXURIOUS"
    QUIET = "QUIET"
    LIVELY = "LIVELY"
    CLASSIC = "CLASSIC"
    MODERN = "MODERN"
    CLEAN = "CLEAN"
    ROMANTIC = "ROMANTIC"
    UNKNOWN = "UNKNOWN"


VIBE_KEYWORDS: dict[Vibe, tuple[str, ...]] = {
    Vibe.ROMANTIC: ("로맨틱", "데이트", "기념일", "프러포즈", "연인"),
    Vibe.LUXURIOUS: ("고급", "럭셔리", "특별한 날", "접대", "파인다이닝"),
    Vibe.QUIET: ("조용", "차분", "대화", "상견례"),
    Vibe.LIVELY: ("활기", "신나", "회식", "파티", "모임"),
    Vibe.CLASSIC: ("클래식", "전통", "노포"),
    Vibe.MODERN: ("모던", "트렌디", "요즘", "핫플"),
    Vibe.CLEAN: ("깔끔", "깨끗", "정갈"),
}


def classify_vibe(text: str) -> Vibe:
    """Return the first vibe whose keywords appear in ``text``."""
    normalized = text.strip().lower()
    for vibe, keywords in VIBE_KEYWORDS.items():
        if any(keyword in normalized for keyword in keywords):
            logger.debug("Classified %r as %s", text, vibe.value)
            return vibe
    return Vibe.UNKNOWN
