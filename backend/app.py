import logging
import traceback

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from models import db, utcnow, isoformat
from auth.routes import auth_bp
from auth.services import build_auth_service
from transactions.routes import transactions_bp
from utils.errors import ApiError, AuthError
from utils.log_setup import setup_logging
from config import Config

logger = logging.getLogger("hisaab_kitaab")


def _register_jwt_callbacks(jwt: JWTManager) -> None:

    def _unauthorized(message):
        return jsonify(AuthError(message).to_dict()), 401

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthorized("No token provided, authorization denied")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _unauthorized("Token is not valid")

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _unauthorized("Token has expired")

    @jwt.token_verification_failed_loader
    def failed_verification(jwt_header, jwt_payload):
        return _unauthorized("Token is not valid")


def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(404)
    def handle_not_found(err):
        return jsonify({"success": False, "message": "API endpoint not found"}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"success": False, "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        db.session.rollback()
        logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=err)
        body = {"success": False, "message": "Internal server error"}
        if app.config.get("APP_ENV") != "production":
            body["stack"] = "".join(traceback.format_exception(type(err), err, err.__traceback__))
        return jsonify(body), 500


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    setup_logging(app.config["LOG_LEVEL"], app.config["LOG_JSON"])

    CORS(app, origins=app.config["CLIENT_URL"], supports_credentials=True)

    db.init_app(app)
    with app.app_context():
        db.create_all()

    jwt = JWTManager(app)
    _register_jwt_callbacks(jwt)

    # one strategy (and, in demo mode, one user map) per app instance
    app.extensions["auth_service"] = build_auth_service(app.config["AUTH_MODE"])

    app.register_blueprint(auth_bp)
    app.register_blueprint(transactions_bp)

    @app.before_request
    def log_request():
        logger.info("%s %s", request.method, request.path)

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({
            "success": True,
            "message": "Hisaab Kitaab API is running!",
            "timestamp": isoformat(utcnow()),
        })

    _register_error_handlers(app)

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
