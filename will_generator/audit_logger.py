"""
Audit logging module for immutable audit trail.

Validation runs, document generation and blocked finalize attempts are
recorded with an integrity hash. Only field paths, codes and fingerprints
are stored, never names or addresses from the questionnaire.
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from flask import current_app, has_request_context, request

from will_generator import db
from will_generator.models import AuditLog


class AuditAction:
    """Constants for audit actions."""
    VALIDATION_PASSED = 'validation_passed'
    VALIDATION_FAILED = 'validation_failed'
    PREVIEW_RENDERED = 'preview_rendered'
    DOCUMENT_GENERATED = 'document_generated'
    FINALIZE_BLOCKED = 'finalize_blocked'


class AuditCategory:
    """Constants for audit action categories."""
    VALIDATE = 'validate'
    PREVIEW = 'preview'
    GENERATE = 'generate'


def log_action(
    action: str,
    action_category: str,
    jurisdiction_code: Optional[str] = None,
    document_sha256: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    success: bool = True,
    error_message: Optional[str] = None
) -> Optional[AuditLog]:
    """
    Log an action to the audit trail.

    Args:
        action: The action performed (use AuditAction constants)
        action_category: Category of action (use AuditCategory constants)
        jurisdiction_code: Resolved two-letter jurisdiction code
        document_sha256: SHA256 of the generated PDF, if any
        details: Additional structured details
        success: Whether the action succeeded
        error_message: Error message if action failed

    Returns:
        The created AuditLog record, or None when auditing is disabled or fails
    """
    if not current_app.config.get('AUDIT_ENABLED', True):
        return None

    ip_address = request.remote_addr if has_request_context() else None
    user_agent = request.headers.get('User-Agent') if has_request_context() else None

    try:
        audit_log = AuditLog(
            action=action,
            action_category=action_category,
            jurisdiction_code=jurisdiction_code,
            document_sha256=document_sha256,
            details_json=json.dumps(details, sort_keys=True) if details else None,
            success=success,
            error_message=error_message,
            ip_address=ip_address,
            user_agent=user_agent
        ).seal()

        db.session.add(audit_log)
        db.session.commit()
        return audit_log

    except Exception as e:
        db.session.rollback()
        # The request that triggered the event still completes
        current_app.logger.error(f'Failed to write audit record {action}: {str(e)}')
        return None


def log_validation_result(jurisdiction_code: str, error_fields: List[str],
                          step_index: Optional[int] = None) -> Optional[AuditLog]:
    """Log a validation run by field path only."""
    passed = not error_fields
    details = {'step': step_index, 'error_count': len(error_fields)}
    if error_fields:
        details['fields'] = sorted(error_fields)
    return log_action(
        action=AuditAction.VALIDATION_PASSED if passed else AuditAction.VALIDATION_FAILED,
        action_category=AuditCategory.VALIDATE,
        jurisdiction_code=jurisdiction_code,
        details=details,
        success=passed
    )


def log_preview_rendered(jurisdiction_code: str, article_count: int, placeholder_count: int) -> Optional[AuditLog]:
    """Log a text preview."""
    return log_action(
        action=AuditAction.PREVIEW_RENDERED,
        action_category=AuditCategory.PREVIEW,
        jurisdiction_code=jurisdiction_code,
        details={'article_count': article_count, 'placeholder_count': placeholder_count}
    )


def log_document_generated(jurisdiction_code: str, pdf_hash: str, article_count: int) -> Optional[AuditLog]:
    """Log PDF generation."""
    return log_action(
        action=AuditAction.DOCUMENT_GENERATED,
        action_category=AuditCategory.GENERATE,
        jurisdiction_code=jurisdiction_code,
        document_sha256=pdf_hash,
        details={'article_count': article_count}
    )


def log_finalize_blocked(jurisdiction_code: str, reason: str, fields: Optional[List[str]] = None) -> Optional[AuditLog]:
    """Log a download refused by the finalize gate."""
    details = {'reason': reason}
    if fields:
        details['fields'] = sorted(fields)
    return log_action(
        action=AuditAction.FINALIZE_BLOCKED,
        action_category=AuditCategory.GENERATE,
        jurisdiction_code=jurisdiction_code,
        details=details,
        success=False,
        error_message=reason
    )


def verify_audit_integrity() -> Tuple[int, int, List[int]]:
    """
    Re-hash every audit record.

    Returns:
        Tuple of (valid_count, invalid_count, invalid_ids)
    """
    invalid_ids = [log.id for log in AuditLog.query.order_by(AuditLog.id) if not log.verify_integrity()]
    total = AuditLog.query.count()
    if invalid_ids:
        current_app.logger.warning(f'Audit records failed integrity check: {invalid_ids}')
    return total - len(invalid_ids), len(invalid_ids), invalid_ids
