from flask import Blueprint, jsonify

from portal.routes.common import confirmed, current_session, json_body, optional_version, services, to_json
from portal.services.reporting import inquiry_counts


bp = Blueprint("messages", __name__, url_prefix="/api/messages")


@bp.post("")
def submit():
    """
    Public contact form. JSON: { name, email, subject, body, priority?, category? }
    """
    body = json_body()
    inquiry = services().inquiries.submit_inquiry(
        current_session(),
        name=body.get("name"),
        email=body.get("email"),
        subject=body.get("subject"),
        body=body.get("body"),
        priority=body.get("priority"),
        category=body.get("category"),
    )
    return jsonify({"id": inquiry.id, "status": "received"}), 201


@bp.get("")
def list_all():
    messages = services().inquiries.list_all(current_session())
    return jsonify({**inquiry_counts(messages), "messages": to_json(messages)}), 200


@bp.get("/<message_id>")
def view(message_id: str):
    return jsonify(to_json(services().inquiries.view(current_session(), message_id))), 200


@bp.post("/<message_id>/read")
def mark_read(message_id: str):
    return jsonify(to_json(services().inquiries.mark_read(current_session(), message_id))), 200


@bp.post("/<message_id>/reply")
def reply(message_id: str):
    """
    JSON: { response: string, version?: int }
    """
    body = json_body()
    inquiry = services().inquiries.respond(
        current_session(), message_id, body.get("response"), expected_version=optional_version(body)
    )
    return jsonify(to_json(inquiry)), 200


@bp.delete("/<message_id>")
def remove(message_id: str):
    services().inquiries.remove(current_session(), message_id, confirm=confirmed())
    return jsonify({"deleted": message_id}), 200
