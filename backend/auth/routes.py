# backend/auth/routes.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt
from pydantic import ValidationError

from auth.schemas import RegisterSchema, LoginSchema, ProfileUpdateSchema
from auth.services import get_auth_service
from utils.errors import validation_failed

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
def register():

    try:
        data = RegisterSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        raise validation_failed(e)

    result = get_auth_service().register(data)

    return jsonify({"success": True, "message": "User registered successfully", **result}), 201


@auth_bp.route("/login", methods=["POST"])
def login():

    try:
        data = LoginSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        raise validation_failed(e)

    result = get_auth_service().login(data)

    return jsonify({"success": True, "message": "Login successful", **result}), 200


@auth_bp.route("/profile", methods=["GET"])
@jwt_required()
def get_profile():
    result = get_auth_service().get_profile(get_jwt_identity(), get_jwt())
    return jsonify({"success": True, **result}), 200


@auth_bp.route("/profile", methods=["PUT"])
@jwt_required()
def update_profile():

    try:
        data = ProfileUpdateSchema.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        raise validation_failed(e)

    result = get_auth_service().update_profile(get_jwt_identity(), get_jwt(), data)

    return jsonify({"success": True, "message": "Profile updated successfully", **result}), 200
