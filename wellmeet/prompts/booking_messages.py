"""Labels shown by the reservation form and booking detail screens."""

from wellmeet.schemas.booking_schema import BookingStatus

QUICK_DATE_LABELS: tuple[str, ...] = ("오늘", "내일", "모레")
WEEKDAY_LABELS: tuple[str, ...] = ("월", "화", "수", "목", "금", "토", "일")

STATUS_LABELS: dict[BookingStatus, str] = {
    BookingStatus.PENDING: "예약 대기",
    BookingStatus.CONFIRMED: "예약 확정",
    BookingStatus.COMPLETED: "방문 완료",
    BookingStatus.CANCELLED: "예약 취소",
}

CANCEL_CONFIRMATION = "정말 예약을 취소하시겠어요? 취소 후에는 되돌릴 수 없어요."


def status_label(status: BookingStatus) -> str:
    return STATUS_LABELS.get(status, "알 수 없음")
