from itts_community.errors import NotFound
from itts_community.extensions import db
from itts_community.models.partner import Partner
from itts_community.services.audit_service import AuditService
from itts_community.utils.pagination import list_query
from itts_community.utils.redis_lock import redis_lock

LOCK_TTL = 5


class PartnerService:

    @staticmethod
    def get(partner_id):
        partner = db.session.get(Partner, partner_id)
        if partner is None:
            raise NotFound("partner", partner_id)
        return partner

    @staticmethod
    def list_partners(params):
        return list_query(
            Partner.query,
            Partner,
            params,
            search_columns=(Partner.name, Partner.subtitle, Partner.description),
            sort_fields={"priority": Partner.priority, "name": Partner.name, "created_at": Partner.created_at},
            default_sort=(Partner.priority.desc(), Partner.name.asc()),
        )

    @staticmethod
    def create(data, actor_id):
        with redis_lock("lock:partners:create", LOCK_TTL):
            partner = Partner(**data)
            db.session.add(partner)
            db.session.flush()
            AuditService.record("partner.create", user_id=actor_id, resource_type="partner", resource_id=partner.id,
                                metadata={"kind": partner.kind})
            db.session.commit()
        return partner

    @staticmethod
    def update(partner_id, data, actor_id):
        with redis_lock(f"lock:partners:{partner_id}", LOCK_TTL):
            partner = PartnerService.get(partner_id)
            for key, value in data.items():
                setattr(partner, key, value)
            AuditService.record("partner.update", user_id=actor_id, resource_type="partner", resource_id=partner.id,
                                metadata={"fields": sorted(data.keys())})
            db.session.commit()
        return partner

    @staticmethod
    def set_active(partner_id, is_active, actor_id):
        return PartnerService.update(partner_id, {"is_active": is_active}, actor_id)

    @staticmethod
    def set_priority(partner_id, priority, actor_id):
        return PartnerService.update(partner_id, {"priority": priority}, actor_id)

    @staticmethod
    def delete(partner_id, actor_id):
        with redis_lock(f"lock:partners:{partner_id}", LOCK_TTL):
            partner = PartnerService.get(partner_id)
            db.session.delete(partner)
            AuditService.record("partner.delete", user_id=actor_id, resource_type="partner", resource_id=partner_id)
            db.session.commit()
