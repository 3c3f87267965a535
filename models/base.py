import enum


# ============================================================================
# ENUMS
# ============================================================================

class FileState(str, enum.Enum):
    """Per-file coordinator states, in transition order"""
    OPENED = "opened"
    PARSED = "parsed"
    TRANSACTION_BEGUN = "transaction_begun"
    INSERTING = "inserting"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    DELETED = "deleted"
    RETAINED = "retained"


class FileOutcome(str, enum.Enum):
    """How a spool file left the coordinator"""
    INGESTED = "ingested"
    OPEN_FAILED = "open_failed"
    MALFORMED = "malformed"
    INSERT_FAILED = "insert_failed"
    COMMITTED_NOT_DELETED = "committed_not_deleted"


class RotationStatus(str, enum.Enum):
    """Rotation outcome"""
    ROTATED = "rotated"
    NO_ACTIVE_FILE = "no_active_file"
    FAILED = "failed"


class RunStatus(str, enum.Enum):
    """Run-level outcome"""
    COMPLETED = "completed"
    NOTHING_TO_DO = "nothing_to_do"
