"""Equipment status constants and the groupings built on top of them."""

STATUS_IN_USE = "In Use"
STATUS_IN_STOCK = "In Stock"
STATUS_DAMAGED = "Damaged"
STATUS_E_WASTE = "E-Waste"
STATUS_REMOVED = "Removed"

STATUS_CHOICES = (
    STATUS_IN_USE,
    STATUS_IN_STOCK,
    STATUS_DAMAGED,
    STATUS_E_WASTE,
    STATUS_REMOVED,
)

DEFAULT_STATUS = STATUS_IN_STOCK

# Statuses rolled into the "removed" dashboard bucket and skipped by
# warranty alerts. Soft-deleted rows join this bucket regardless of status.
OUT_OF_SERVICE_STATUSES = frozenset({STATUS_E_WASTE, STATUS_DAMAGED, STATUS_REMOVED})


def is_valid_status(value: object) -> bool:
    return isinstance(value, str) and value in STATUS_CHOICES


__all__ = [
    "DEFAULT_STATUS",
    "OUT_OF_SERVICE_STATUSES",
    "STATUS_CHOICES",
    "STATUS_DAMAGED",
    "STATUS_E_WASTE",
    "STATUS_IN_STOCK",
    "STATUS_IN_USE",
    "STATUS_REMOVED",
    "is_valid_status",
]
