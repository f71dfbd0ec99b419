from flask import Blueprint, jsonify, request

from portal.models.labels import label_for
from portal.routes.common import current_session, json_body, optional_version, services, to_json, upload_from_request


bp = Blueprint("payments", __name__, url_prefix="/api/payments")


@bp.get("/fees")
def fees():
    schedule = services().payments.fee_schedule()
    return jsonify([{**to_json(f), "label": label_for(f.code)} for f in schedule]), 200


@bp.post("")
def record():
    """
    multipart/form-data: amount, currency, payment_method, notes?, slip.
    """
    payment = services().payments.record_payment(
        current_session(),
        amount=request.form.get("amount"),
        currency=request.form.get("currency"),
        method=request.form.get("payment_method"),
        slip_file=upload_from_request("slip"),
        notes=request.form.get("notes"),
    )
    return jsonify(to_json(payment)), 201


@bp.get("/mine")
def mine():
    payments = services().payments.list_for_owner(current_session())
    return jsonify({"count": len(payments), "payments": to_json(payments)}), 200


@bp.get("")
def list_all():
    payments = services().payments.list_all(current_session())
    return jsonify({"count": len(payments), "payments": to_json(payments)}), 200


@bp.get("/<payment_id>")
def get_one(payment_id: str):
    return jsonify(to_json(services().payments.get(current_session(), payment_id))), 200


@bp.post("/<payment_id>/status")
def update_status(payment_id: str):
    """
    JSON: { status: string, version?: int }
    """
    body = json_body()
    payment = services().payments.update_status(
        current_session(), payment_id, body.get("status"), expected_version=optional_version(body)
    )
    return jsonify(to_json(payment)), 200
