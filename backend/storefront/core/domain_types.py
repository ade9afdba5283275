"""Domain Types — enums that replace bare string states across the codebase.

Invariants:
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Schema Enums ────────────────────────────────────────────────

class FieldType(str, Enum):
    """JSON Schema value types accepted by FieldDefinition."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class FieldFormat(str, Enum):
    """String refinements with dedicated widgets or validation."""
    EMAIL = "email"
    DATE = "date"
    DATE_TIME = "date-time"
    TEXTAREA = "textarea"


# ─── Controller States ───────────────────────────────────────────

class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TableStatus(str, Enum):
    """Per-table load lifecycle: idle -> loading -> loaded | errored."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


class ErrorKind(str, Enum):
    """How a failed call is presented: retryable, access denied, or missing."""
    NETWORK = "network"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"


class SubmitOutcome(str, Enum):
    """Result of FormController.submit()."""
    BLOCKED = "blocked"
    SUBMITTED = "submitted"
    FAILED = "failed"


class EditorMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"
