"""Error taxonomy for the inventory and review store."""


class LegacyLabelerError(Exception):
    """Base class for all review service errors."""


class ReviewStoreError(LegacyLabelerError):
    """Raised for problems with the persisted review collection."""


class CorruptStateError(ReviewStoreError):
    """The state file exists but could not be parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Review data file {path} is unreadable: {reason}")
        self.path = path
        self.reason = reason


class StateWriteError(ReviewStoreError):
    """Writing the state file failed; the previous file is left untouched."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to write review data to {path}: {reason}")
        self.path = path
        self.reason = reason


class DocumentNotFoundError(LegacyLabelerError):
    """No review exists for the requested document id."""

    def __init__(self, document_id: str):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class InvalidTransitionError(LegacyLabelerError):
    """A status change that the review state machine does not allow."""

    def __init__(self, document_id: str, current: str, target: str):
        super().__init__(
            f"Document {document_id} cannot move from {current} to {target}"
        )
        self.document_id = document_id
        self.current = current
        self.target = target
