"""
Canonical employment status.

The source ``employee_status`` / ``status`` columns hold free text ("REGULAR",
"Working", "ACTIVE", "In-charge", ...) or small integer codes ("1", "2", "3").
Each legacy encoding is mapped to a StatusBucket once, when a row is written,
so queries compare against a single canonical column.
"""
import enum
import re


class StatusBucket(str, enum.Enum):
    REGULAR = "regular"
    INCHARGE = "incharge"
    SUSPENDED = "suspended"
    OTHER = "other"


STATUS_LABELS = {
    StatusBucket.REGULAR: "Regular",
    StatusBucket.INCHARGE: "Incharge",
    StatusBucket.SUSPENDED: "Suspended",
    StatusBucket.OTHER: "Regular",
}

_NUMERIC_CODES = {
    "1": StatusBucket.REGULAR,
    "2": StatusBucket.INCHARGE,
    "3": StatusBucket.SUSPENDED,
}

# Checked in order; suspension wins over anything else in the same text
_KEYWORDS = (
    ("SUSPEN", StatusBucket.SUSPENDED),  # SUSPEND, SUSPENDED, SUSPENSION
    ("INCHARGE", StatusBucket.INCHARGE),
    ("REGULAR", StatusBucket.REGULAR),
    ("ACTIVE", StatusBucket.REGULAR),
    ("WORKING", StatusBucket.REGULAR),
)

# Words that turn "Working" / "Active" into their opposite
_NEGATIONS = {"NOT", "NON", "NO"}
# Negated forms written as one word; matched anywhere in the squashed text
_NEGATED_FORMS = ("INACTIVE", "IRREGULAR", "NONWORKING", "NOTWORKING")

_NON_ALPHA = re.compile(r"[^A-Z0-9]")
_WORDS = re.compile(r"[A-Z0-9]+")


def status_bucket(raw: object) -> StatusBucket:
    """Map a legacy status value to its bucket; unknown values are OTHER."""
    if raw is None:
        return StatusBucket.OTHER

    text = str(raw).strip()
    if not text:
        return StatusBucket.OTHER
    if text in _NUMERIC_CODES:
        return _NUMERIC_CODES[text]

    upper = text.upper()
    if _NEGATIONS.intersection(_WORDS.findall(upper)):
        return StatusBucket.OTHER

    squashed = _NON_ALPHA.sub("", upper)  # "In-Charge" -> "INCHARGE"
    if any(form in squashed for form in _NEGATED_FORMS):
        return StatusBucket.OTHER
    for keyword, bucket in _KEYWORDS:
        if keyword in squashed:
            return bucket
    return StatusBucket.OTHER


def parse_status_filter(value: str | None) -> StatusBucket | None:
    """Filter value from a query string; anything unrecognised means no filter."""
    if not value:
        return None
    try:
        bucket = StatusBucket(value.strip().lower())
    except ValueError:
        return None
    return None if bucket is StatusBucket.OTHER else bucket


def status_label(raw: object) -> str:
    return STATUS_LABELS[status_bucket(raw)]
