from itts_community.errors import NotFound
from itts_community.extensions import db
from itts_community.models.mentor import Mentor
from itts_community.services.audit_service import AuditService
from itts_community.utils.pagination import list_query
from itts_community.utils.redis_lock import redis_lock

LOCK_TTL = 5

SORT_FIELDS = {
    "priority": Mentor.priority,
    "full_name": Mentor.full_name,
    "created_at": Mentor.created_at,
}


def program_filter(column, program):
    # programs is a JSON list; match the quoted value in its text form
    return db.cast(column, db.String).like(f'%"{program}"%')


class MentorService:

    @staticmethod
    def get(mentor_id):
        mentor = db.session.get(Mentor, mentor_id)
        if mentor is None:
            raise NotFound("mentor", mentor_id)
        return mentor

    @staticmethod
    def list_mentors(params, program=None):
        query = Mentor.query
        if program:
            query = query.filter(program_filter(Mentor.programs, program))
        return list_query(
            query,
            Mentor,
            params,
            search_columns=(Mentor.full_name, Mentor.title, Mentor.bio),
            sort_fields=SORT_FIELDS,
            default_sort=(Mentor.priority.desc(), Mentor.full_name.asc()),
        )

    @staticmethod
    def create(data, actor_id):
        with redis_lock("lock:mentors:create", LOCK_TTL):
            mentor = Mentor(**data)
            db.session.add(mentor)
            db.session.flush()
            AuditService.record("mentor.create", user_id=actor_id, resource_type="mentor", resource_id=mentor.id)
            db.session.commit()
        return mentor

    @staticmethod
    def update(mentor_id, data, actor_id):
        with redis_lock(f"lock:mentors:{mentor_id}", LOCK_TTL):
            mentor = MentorService.get(mentor_id)
            for key, value in data.items():
                setattr(mentor, key, value)
            AuditService.record("mentor.update", user_id=actor_id, resource_type="mentor", resource_id=mentor.id,
                                metadata={"fields": sorted(data.keys())})
            db.session.commit()
        return mentor

    @staticmethod
    def set_active(mentor_id, is_active, actor_id):
        return MentorService.update(mentor_id, {"is_active": is_active}, actor_id)

    @staticmethod
    def set_priority(mentor_id, priority, actor_id):
        return MentorService.update(mentor_id, {"priority": priority}, actor_id)

    @staticmethod
    def delete(mentor_id, actor_id):
        with redis_lock(f"lock:mentors:{mentor_id}", LOCK_TTL):
            mentor = MentorService.get(mentor_id)
            db.session.delete(mentor)
            AuditService.record("mentor.delete", user_id=actor_id, resource_type="mentor", resource_id=mentor_id)
            db.session.commit()
