"""Application constants."""

DEFAULT_REGION = "us-east-1"
RECORD_KIND_ORDER = (
    "services",
    "requests",
    "cities",
)
DEFAULT_TABLE_NAMES = {
    "services": "Services",
    "requests": "Requests",
    "cities": "Cities",
}
# Provisioned throughput is kept low to stay inside the AWS free tier.
DEFAULT_READ_CAPACITY = 5
DEFAULT_WRITE_CAPACITY = 5
TABLE_STATUS_ACTIVE = "ACTIVE"
TABLE_STATUS_PENDING = ("CREATING", "UPDATING")
EXIT_SUCCESS = 0
EXIT_USAGE = 2
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "kind",
    "table",
    "key",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "records_in",
    "records_out",
    "error_code",
    "message",
)
