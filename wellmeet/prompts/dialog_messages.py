"""
User-facing dialog copy and quick-reply option sets.

Every string the recommendation dialog can show lives here so wording
stays consistent across the fixed-question and free-text variants.
Empty results, service failures, and transport failures each keep
their own wording.
"""

GREETING = (
    "안녕하세요! 어떤 상황에서 드실 건가요? "
    "자세히 설명해주시면 완벽한 맛집을 추천해드릴게요 😊"
)
FREE_TEXT_GREETING = (
    "안녕하세요! 원하시는 분위기나 상황을 자유롭게 말씀해주세요. "
    "딱 맞는 곳을 찾아드릴게요 😊"
)

PARTY_SIZE_QUESTION = "몇 명이서 가시나요?"
PARTY_SIZE_OPTIONS: tuple[str, ...] = ("2명", "3명", "4명", "5명 이상")

BUDGET_QUESTION = "예산은 어느 정도 생각하고 계세요?"
BUDGET_OPTIONS: tuple[str, ...] = ("8-12만원", "12-20만원", "20-30만원", "30만원 이상")

NO_STOCKED_MATCH = (
    "아쉽게도 말씀하신 조건에 맞는 곳을 아직 찾지 못했어요. "
    "다른 인원이나 예산으로 다시 찾아볼까요?"
)
NO_MATCH = "조건에 맞는 맛집을 찾지 못했어요. 다른 표현으로 다시 말씀해주시겠어요?"
SERVICE_ERROR = "추천 서비스에 문제가 생겼어요. 잠시 후 다시 시도해주세요."
TRANSPORT_ERROR = "네트워크 연결이 원활하지 않아요. 연결 상태를 확인한 뒤 다시 시도해주세요."

ASK_AGAIN = "다른 상황이나 조건으로 추천받고 싶으시면 말씀해주세요! 😊"


def build_recommendation_message(count: int, occasion: str = "") -> str:
    """Build the headline for a terminal candidate-list turn."""
    if occasion:
        return f"'{occasion}'에 어울리는 {count}곳을 추천드려요! 🎉"
    return f"딱 맞는 {count}곳을 추천드려요! 🎉"
