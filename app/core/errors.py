"""Error kinds raised by the reservation and history services.

The services never speak HTTP. Each class carries a ``kind`` that the API
layer maps to a status code in ``app.core.exceptions``.
"""


class ClinicError(Exception):
    kind = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(ClinicError):
    kind = "validation_error"


class NotFoundError(ClinicError):
    kind = "not_found"
    entity = "resource"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or f"{self.entity} not found")


class ReservationNotFoundError(NotFoundError):
    entity = "reservation"

    def __init__(self) -> None:
        super().__init__("Reservation not found")


class HistoryEntryNotFoundError(NotFoundError):
    entity = "history_entry"

    def __init__(self, message: str = "History entry not found") -> None:
        super().__init__(message)


class SpecializationNotFoundError(NotFoundError):
    entity = "specialization"

    def __init__(self) -> None:
        super().__init__("Specialization not found")


class QueueDataNotFoundError(NotFoundError):
    entity = "queue"

    def __init__(self) -> None:
        super().__init__("Data not found")


class ConflictError(ClinicError):
    kind = "conflict"


class QueueConflictError(ConflictError):
    def __init__(self) -> None:
        super().__init__("Queue number assignment is in progress. Retry the request.")


class InvalidStatusTransitionError(ConflictError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot change history status from {current} to {target}")
        self.current = current
        self.target = target


class PersistenceError(ClinicError):
    kind = "internal"
