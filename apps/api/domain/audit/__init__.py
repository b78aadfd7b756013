"""Audit trail domain module."""

from .models import TransactionLog
from .writer import AuditEntry, AuditLogWriter, build_audit_entry

__all__ = ["TransactionLog", "AuditEntry", "AuditLogWriter", "build_audit_entry"]
