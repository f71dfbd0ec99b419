from typing import Optional

from flask import Flask, jsonify
from portal.errors import PortalError
from portal.models.submission import MAX_PAPER_BYTES
from portal.routes.dashboard import bp as dashboard_bp
from portal.routes.health import bp as health_bp
from portal.routes.messages import bp as messages_bp
from portal.routes.papers import bp as papers_bp
from portal.routes.payments import bp as payments_bp
from portal.routes.profiles import bp as profiles_bp
from portal.services.container import Services
from portal.utils.config import FLASK_ENV, HOST, PORT, ensure_dirs
from portal.utils.logger import get_logger
from portal.utils.validation import mib


logger = get_logger("server")

# Largest manuscript plus room for the other multipart fields.
MAX_UPLOAD_BYTES = MAX_PAPER_BYTES + 1024 * 1024


def create_app(services: Optional[Services] = None) -> Flask:
    if services is None:
        ensure_dirs()
        services = Services.build()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES
    app.extensions["portal"] = services
    services.events.subscribe(lambda name, payload: logger.debug("event %s %s", name, payload))

    for bp in (health_bp, papers_bp, payments_bp, messages_bp, profiles_bp, dashboard_bp):
        app.register_blueprint(bp)


    @app.errorhandler(PortalError)
    def portal_error(e: PortalError):
        if e.status_code >= 500:
            logger.error("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code


    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"error": f"Request body must be less than {mib(MAX_UPLOAD_BYTES)}"}), 413


    @app.get("/")
    def root():
        return jsonify({"service": "conference-portal", "env": FLASK_ENV})


    return app


if __name__ == "__main__":
    logger.info("Starting conference portal on %s:%s (%s)", HOST, PORT, FLASK_ENV)
    create_app().run(host=HOST, port=PORT)
