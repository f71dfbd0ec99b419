from flask import Blueprint, jsonify

from portal.routes.common import current_session, services, to_json


bp = Blueprint("dashboard", __name__, url_prefix="/api")


@bp.get("/dashboard")
def user_dashboard():
    return jsonify(to_json(services().reporting.user_dashboard(current_session()))), 200


@bp.get("/admin/dashboard")
def admin_dashboard():
    return jsonify(to_json(services().reporting.admin_dashboard(current_session()))), 200


@bp.get("/admin/financials")
def financials():
    return jsonify(to_json(services().reporting.financial_summary(current_session()))), 200
