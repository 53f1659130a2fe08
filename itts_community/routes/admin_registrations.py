from flask import Blueprint, request

from itts_community.schemas.registration import RegistrationOutSchema, RejectRegistrationSchema
from itts_community.security.permissions import current_auth, require_permission
from itts_community.services.registration_service import RegistrationService
from itts_community.utils.pagination import arg_int, arg_str, parse_list_params
from itts_community.utils.responses import no_content, ok, paginated
from itts_community.utils.validation import load_json

registrations_bp = Blueprint("admin_registrations", __name__, url_prefix="/api/v1/admin")

registration_schema = RegistrationOutSchema()


@registrations_bp.get("/registrations")
@require_permission("registrations:read")
def list_registrations():
    params = parse_list_params(request.args)
    email = arg_str(request.args, "email")
    params.filters = {
        "status": arg_str(request.args, "status"),
        "program": arg_str(request.args, "program"),
        "intake_year": arg_int(request.args, "intake_year"),
        "email": email.lower() if email else None,
    }
    return paginated(RegistrationService.list_registrations(params), registration_schema)


@registrations_bp.get("/registrations/<registration_id>")
@require_permission("registrations:read")
def get_registration(registration_id):
    return ok(registration_schema.dump(RegistrationService.get(registration_id)))


@registrations_bp.post("/registrations/<registration_id>/approve")
@require_permission("registrations:update")
def approve_registration(registration_id):
    """Approve a registration whose e-mail has been verified."""
    registration = RegistrationService.approve(registration_id, current_auth().user_id)
    return ok(registration_schema.dump(registration))


@registrations_bp.post("/registrations/<registration_id>/reject")
@require_permission("registrations:update")
def reject_registration(registration_id):
    data = load_json(RejectRegistrationSchema())
    registration = RegistrationService.reject(registration_id, current_auth().user_id, data["reason"])
    return ok(registration_schema.dump(registration))


@registrations_bp.delete("/registrations/<registration_id>")
@require_permission("registrations:delete")
def delete_registration(registration_id):
    RegistrationService.delete(registration_id, current_auth().user_id)
    return no_content()
