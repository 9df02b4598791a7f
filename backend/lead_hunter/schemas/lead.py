"""Lead pipeline vocabulary."""

from enum import Enum


class LeadStatus(str, Enum):
    """
    Statuses accepted for new writes.
    Stored rows may still hold legacy free-text values; readers treat those
    as opaque strings.
    """
    ACTIVE = "ACTIVE"
    TRIAGE = "TRIAGE"
    ARCHIVED = "ARCHIVED"
