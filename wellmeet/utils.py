"""Shared utilities used across the dialog and booking flows."""

import re
from typing import Optional

PARTY_BUCKET_MAX = 5


def parse_party_size(value: Optional[str]) -> Optional[int]:
    """Extract the head count from a party-size bucket label.

    Examples:
        >>> parse_party_size("2명")
        2
        >>> parse_party_size("5명 이상")
        5
        >>> parse_party_size("잘 모르겠어요") is None
        True
    """
    if not value:
        return None
    match = re.search(r"\d+", value)
    if not match:
        return None
    count = int(match.group())
    return count if count >= 1 else None


def party_bucket_label(count: int) -> str:
    """Map a head count onto the quick-reply bucket it belongs to."""
    if count >= PARTY_BUCKET_MAX:
        return f"{PARTY_BUCKET_MAX}명 이상"
    return f"{count}명"


def normalize_label(value: str) -> str:
    """Strip all whitespace so typed labels compare equal to chip labels."""
    return re.sub(r"\s+", "", value)


def format_won(amount: int) -> str:
    """Format an integer amount of won with thousands separators.

    Examples:
        >>> format_won(375000)
        '375,000원'
    """
    return f"{amount:,}원"
