from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from pydantic import ValidationError

from dashboard.services import get_dashboard
from utils.errors import validation_failed
from utils.responses import ok

from .schemas import TransactionCreateSchema, TransactionUpdateSchema, TransactionFilterSchema
from . import services


transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.before_request
@jwt_required()
def _require_token():
    """Every transaction route needs a bearer token."""


def _body() -> dict:
    return request.get_json(silent=True) or {}


@transactions_bp.route("/dashboard", methods=["GET"])
def dashboard():
    """
    Aggregated stats for the current user.
    Query params: period = week | month (default) | year.
    """
    period = (request.args.get("period") or "").strip() or None
    return ok(get_dashboard(get_jwt_identity(), period))


@transactions_bp.route("", methods=["GET"])
def list_transactions():
    """
    Query params: type, category (substring), startDate, endDate, search,
    isSettled, page (default 1), limit (default 10).
    """
    try:
        filters = TransactionFilterSchema.model_validate(request.args.to_dict())
    except ValidationError as e:
        raise validation_failed(e)

    records, page_info = services.list_transactions(get_jwt_identity(), filters)
    return ok([r.to_dict() for r in records], pagination=page_info)


@transactions_bp.route("/<txn_id>", methods=["GET"])
def get_transaction(txn_id):
    txn = services.get_transaction(get_jwt_identity(), txn_id)
    return ok(txn.to_dict())


@transactions_bp.route("", methods=["POST"])
def create_transaction():
    try:
        data = TransactionCreateSchema.model_validate(_body())
    except ValidationError as e:
        raise validation_failed(e)

    txn = services.create_transaction(get_jwt_identity(), data)
    return ok(txn.to_dict(), message="Transaction created successfully", status=201)


@transactions_bp.route("/<txn_id>", methods=["PUT"])
def update_transaction(txn_id):
    try:
        data = TransactionUpdateSchema.model_validate(_body())
    except ValidationError as e:
        raise validation_failed(e)

    txn = services.update_transaction(get_jwt_identity(), txn_id, data)
    return ok(txn.to_dict(), message="Transaction updated successfully")


@transactions_bp.route("/<txn_id>", methods=["DELETE"])
def delete_transaction(txn_id):
    services.delete_transaction(get_jwt_identity(), txn_id)
    return ok(message="Transaction deleted successfully")


@transactions_bp.route("/<txn_id>/settle", methods=["PATCH"])
def settle_transaction(txn_id):
    txn = services.mark_settled(get_jwt_identity(), txn_id)
    return ok(txn.to_dict(), message="Transaction marked as settled")
