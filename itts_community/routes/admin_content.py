from flask import Blueprint, request

from itts_community.schemas.mentor import (
    ActiveFlagSchema,
    MentorCreateSchema,
    MentorOutSchema,
    MentorUpdateSchema,
    PrioritySchema,
)
from itts_community.schemas.partner import PartnerCreateSchema, PartnerOutSchema, PartnerUpdateSchema
from itts_community.schemas.roadmap import (
    RoadmapCreateSchema,
    RoadmapItemCreateSchema,
    RoadmapItemOutSchema,
    RoadmapItemUpdateSchema,
    RoadmapOutSchema,
    RoadmapUpdateSchema,
)
from itts_community.security.permissions import current_auth, require_permission
from itts_community.services.mentor_service import MentorService
from itts_community.services.partner_service import PartnerService
from itts_community.services.roadmap_service import RoadmapItemService, RoadmapService
from itts_community.utils.pagination import arg_bool, arg_int, arg_str, parse_list_params
from itts_community.utils.responses import created, no_content, ok, paginated
from itts_community.utils.validation import load_json

content_bp = Blueprint("admin_content", __name__, url_prefix="/api/v1/admin")

mentor_schema = MentorOutSchema()
partner_schema = PartnerOutSchema()
roadmap_schema = RoadmapOutSchema()
item_schema = RoadmapItemOutSchema()


def _actor_id():
    return current_auth().user_id


# ===== MENTORS =====

@content_bp.get("/mentors")
@require_permission("mentors:read")
def list_mentors():
    params = parse_list_params(request.args)
    params.filters = {"is_active": arg_bool(request.args, "is_active")}
    page = MentorService.list_mentors(params, program=arg_str(request.args, "program"))
    return paginated(page, mentor_schema)


@content_bp.post("/mentors")
@require_permission("mentors:create")
def create_mentor():
    data = load_json(MentorCreateSchema())
    return created(mentor_schema.dump(MentorService.create(data, _actor_id())))


@content_bp.get("/mentors/<mentor_id>")
@require_permission("mentors:read")
def get_mentor(mentor_id):
    return ok(mentor_schema.dump(MentorService.get(mentor_id)))


@content_bp.patch("/mentors/<mentor_id>")
@require_permission("mentors:update")
def update_mentor(mentor_id):
    data = load_json(MentorUpdateSchema(), partial=True)
    return ok(mentor_schema.dump(MentorService.update(mentor_id, data, _actor_id())))


@content_bp.patch("/mentors/<mentor_id>/active")
@require_permission("mentors:update")
def set_mentor_active(mentor_id):
    data = load_json(ActiveFlagSchema())
    return ok(mentor_schema.dump(MentorService.set_active(mentor_id, data["is_active"], _actor_id())))


@content_bp.patch("/mentors/<mentor_id>/priority")
@require_permission("mentors:update")
def set_mentor_priority(mentor_id):
    data = load_json(PrioritySchema())
    return ok(mentor_schema.dump(MentorService.set_priority(mentor_id, data["priority"], _actor_id())))


@content_bp.delete("/mentors/<mentor_id>")
@require_permission("mentors:delete")
def delete_mentor(mentor_id):
    MentorService.delete(mentor_id, _actor_id())
    return no_content()


# ===== PARTNERS =====

@content_bp.get("/partners")
@require_permission("partners:read")
def list_partners():
    params = parse_list_params(request.args)
    params.filters = {
        "kind": arg_str(request.args, "kind"),
        "is_active": arg_bool(request.args, "is_active"),
    }
    return paginated(PartnerService.list_partners(params), partner_schema)


@content_bp.post("/partners")
@require_permission("partners:create")
def create_partner():
    data = load_json(PartnerCreateSchema())
    return created(partner_schema.dump(PartnerService.create(data, _actor_id())))


@content_bp.get("/partners/<partner_id>")
@require_permission("partners:read")
def get_partner(partner_id):
    return ok(partner_schema.dump(PartnerService.get(partner_id)))


@content_bp.patch("/partners/<partner_id>")
@require_permission("partners:update")
def update_partner(partner_id):
    data = load_json(PartnerUpdateSchema(), partial=True)
    return ok(partner_schema.dump(PartnerService.update(partner_id, data, _actor_id())))


@content_bp.patch("/partners/<partner_id>/active")
@require_permission("partners:update")
def set_partner_active(partner_id):
    data = load_json(ActiveFlagSchema())
    return ok(partner_schema.dump(PartnerService.set_active(partner_id, data["is_active"], _actor_id())))


@content_bp.patch("/partners/<partner_id>/priority")
@require_permission("partners:update")
def set_partner_priority(partner_id):
    data = load_json(PrioritySchema())
    return ok(partner_schema.dump(PartnerService.set_priority(partner_id, data["priority"], _actor_id())))


@content_bp.delete("/partners/<partner_id>")
@require_permission("partners:delete")
def delete_partner(partner_id):
    PartnerService.delete(partner_id, _actor_id())
    return no_content()


# ===== ROADMAPS =====

@content_bp.get("/roadmaps")
@require_permission("roadmaps:read")
def list_roadmaps():
    params = parse_list_params(request.args)
    params.filters = {
        "program": arg_str(request.args, "program"),
        "is_active": arg_bool(request.args, "is_active"),
        "month_number": arg_int(request.args, "month_number"),
    }
    return paginated(RoadmapService.list_roadmaps(params), roadmap_schema)


@content_bp.post("/roadmaps")
@require_permission("roadmaps:create")
def create_roadmap():
    data = load_json(RoadmapCreateSchema())
    return created(roadmap_schema.dump(RoadmapService.create(data, _actor_id())))


@content_bp.get("/roadmaps/<roadmap_id>")
@require_permission("roadmaps:read")
def get_roadmap(roadmap_id):
    return ok(roadmap_schema.dump(RoadmapService.get(roadmap_id)))


@content_bp.patch("/roadmaps/<roadmap_id>")
@require_permission("roadmaps:update")
def update_roadmap(roadmap_id):
    data = load_json(RoadmapUpdateSchema(), partial=True)
    return ok(roadmap_schema.dump(RoadmapService.update(roadmap_id, data, _actor_id())))


@content_bp.delete("/roadmaps/<roadmap_id>")
@require_permission("roadmaps:delete")
def delete_roadmap(roadmap_id):
    RoadmapService.delete(roadmap_id, _actor_id())
    return no_content()


@content_bp.post("/roadmaps/<roadmap_id>/items")
@require_permission("roadmap_items:create")
def create_nested_roadmap_item(roadmap_id):
    data = load_json(RoadmapItemCreateSchema(exclude=("roadmap_id",)))
    data["roadmap_id"] = roadmap_id
    return created(item_schema.dump(RoadmapItemService.create(data, _actor_id())))


# ===== ROADMAP ITEMS =====

@content_bp.get("/roadmap-items")
@require_permission("roadmap_items:read")
def list_roadmap_items():
    params = parse_list_params(request.args)
    params.filters = {"roadmap_id": arg_str(request.args, "roadmap_id")}
    return paginated(RoadmapItemService.list_items(params), item_schema)


@content_bp.post("/roadmap-items")
@require_permission("roadmap_items:create")
def create_roadmap_item():
    data = load_json(RoadmapItemCreateSchema())
    return created(item_schema.dump(RoadmapItemService.create(data, _actor_id())))


@content_bp.get("/roadmap-items/<item_id>")
@require_permission("roadmap_items:read")
def get_roadmap_item(item_id):
    return ok(item_schema.dump(RoadmapItemService.get(item_id)))


@content_bp.patch("/roadmap-items/<item_id>")
@require_permission("roadmap_items:update")
def update_roadmap_item(item_id):
    data = load_json(RoadmapItemUpdateSchema(), partial=True)
    return ok(item_schema.dump(RoadmapItemService.update(item_id, data, _actor_id())))


@content_bp.delete("/roadmap-items/<item_id>")
@require_permission("roadmap_items:delete")
def delete_roadmap_item(item_id):
    RoadmapItemService.delete(item_id, _actor_id())
    return no_content()
