from app.db.models.history_entry import ALLOWED_TRANSITIONS, HistoryEntry, HistoryStatus
from app.db.models.reservation import Reservation
from app.db.models.specialization import Specialization

__all__ = [
    "Specialization",
    "Reservation",
    "HistoryEntry",
    "HistoryStatus",
    "ALLOWED_TRANSITIONS",
]
