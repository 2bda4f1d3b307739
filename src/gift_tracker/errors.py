"""Exceptions raised at the Gift Tracker command boundary."""


class NotFoundError(Exception):
    """Raised when an id-addressed record does not exist."""

    def __init__(self, kind: str, record_id: int | str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} with ID '{record_id}' not found")
