"""
Audit logging for permission, approval and verification changes.
"""

from aggie_nexus.infrastructure.audit.audit_logger import AuditLogger, audit_logger

__all__ = ["AuditLogger", "audit_logger"]
