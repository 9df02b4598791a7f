"""Lead Hunter CRM core: lead ownership, assignment history and access control."""

__version__ = "1.0.0"
