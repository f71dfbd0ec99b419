from flask import Blueprint, jsonify

from portal.routes.common import confirmed, current_session, json_body, services, to_json


bp = Blueprint("profiles", __name__, url_prefix="/api")


@bp.get("/profile")
def get_profile():
    profile = services().profiles.get_for_owner(current_session())
    return jsonify({"profile": to_json(profile)}), 200


@bp.put("/profile")
def save_profile():
    profile = services().profiles.save(current_session(), json_body())
    return jsonify({"profile": to_json(profile)}), 200


@bp.get("/profiles")
def list_profiles():
    profiles = services().profiles.list_all(current_session())
    return jsonify({"count": len(profiles), "profiles": to_json(profiles)}), 200


@bp.delete("/profiles/<profile_id>")
def remove_profile(profile_id: str):
    services().profiles.remove(current_session(), profile_id, confirm=confirmed())
    return jsonify({"deleted": profile_id}), 200
