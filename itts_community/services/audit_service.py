import logging

from flask import has_request_context, request

from itts_community.extensions import db
from itts_community.models.audit_log import AuditLog
from itts_community.utils.pagination import list_query

audit_logger = logging.getLogger("audit")


class AuditService:

    @staticmethod
    def record(action, user_id=None, resource_type=None, resource_id=None, metadata=None):
        """
        Stage an audit entry on the current session.

        The entry is committed together with the caller's transaction, so an
        operation that rolls back leaves no audit trail behind.
        """
        ip_address = user_agent = None
        if has_request_context():
            ip_address = request.remote_addr
            user_agent = request.user_agent.string if request.user_agent else None

        entry = AuditLog(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            details=metadata or {},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.session.add(entry)

        audit_logger.info(
            action,
            extra={
                "user_id": user_id,
                "resource_type": resource_type,
                "resource_id": entry.resource_id,
                "ip": ip_address,
            },
        )
        return entry

    @staticmethod
    def list_logs(params):
        return list_query(
            AuditLog.query,
            AuditLog,
            params,
            search_columns=(AuditLog.action, AuditLog.resource_type),
            sort_fields={"created_at": AuditLog.created_at, "action": AuditLog.action},
            default_sort=(AuditLog.created_at.desc(),),
        )
