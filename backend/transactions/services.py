from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy import or_

from models import db, utcnow
from models.transaction_model import Transaction, DEBT_TYPES, is_debt_type
from utils.errors import NotFoundError, ValidationFailed
from utils.responses import pagination

from .schemas import (
    TransactionCreateSchema,
    TransactionUpdateSchema,
    TransactionFilterSchema,
    debt_field_errors,
)

logger = logging.getLogger(__name__)

NOT_FOUND = "Transaction not found"


def _contains(term: str) -> str:
    """LIKE pattern matching `term` anywhere, with wildcards escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _owned(user_id: str, txn_id: str, *criteria) -> Transaction:
    # Someone else's id and an unknown id look exactly the same to the caller.
    txn = Transaction.query.filter(
        Transaction.id == txn_id, Transaction.user_id == user_id, *criteria
    ).first()
    if not txn:
        raise NotFoundError(NOT_FOUND)
    return txn


def list_transactions(user_id: str, filters: TransactionFilterSchema) -> Tuple[List[Transaction], dict]:
    q = Transaction.query.filter(Transaction.user_id == user_id)

    if filters.type:
        q = q.filter(Transaction.type == filters.type)
    if filters.category:
        q = q.filter(Transaction.category.ilike(_contains(filters.category), escape="\\"))
    if filters.is_settled is not None:
        q = q.filter(Transaction.is_settled == filters.is_settled)
    if filters.start_date:
        q = q.filter(Transaction.date >= filters.start_date)
    if filters.end_date:
        q = q.filter(Transaction.date <= filters.end_date)
    if filters.search:
        pattern = _contains(filters.search)
        q = q.filter(
            or_(
                Transaction.description.ilike(pattern, escape="\\"),
                Transaction.contact_person.ilike(pattern, escape="\\"),
            )
        )

    total = q.count()
    records = (
        q.order_by(Transaction.date.desc(), Transaction.created_at.desc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
        .all()
    )
    return records, pagination(filters.page, filters.limit, total)


def get_transaction(user_id: str, txn_id: str) -> Transaction:
    return _owned(user_id, txn_id)


def create_transaction(user_id: str, data: TransactionCreateSchema) -> Transaction:
    errors = debt_field_errors(data.type, data.contact_person, data.due_date)
    if errors:
        raise ValidationFailed(errors=errors)

    txn = Transaction(
        user_id=user_id,
        type=data.type,
        category=data.category,
        amount=data.amount,
        description=data.description,
        date=data.date or utcnow(),
        status=data.status or "completed",
        contact_person=data.contact_person,
        contact_phone=data.contact_phone,
        due_date=data.due_date,
        is_settled=Transaction.default_settled(data.type),
        location=data.location,
        receipt=data.receipt,
    )
    txn.tags = data.tags
    db.session.add(txn)
    db.session.commit()

    logger.info("Created %s transaction %s for user %s", txn.type, txn.id, user_id)
    return txn


def update_transaction(user_id: str, txn_id: str, data: TransactionUpdateSchema) -> Transaction:
    txn = _owned(user_id, txn_id)
    changes = data.model_dump(exclude_unset=True)

    new_type = changes.get("type", txn.type)
    errors = debt_field_errors(
        new_type,
        changes.get("contact_person", txn.contact_person),
        changes.get("due_date", txn.due_date),
    )
    if errors:
        raise ValidationFailed(errors=errors)

    if is_debt_type(new_type) != is_debt_type(txn.type):
        # crossing the borrow/lend boundary restarts the settlement state
        txn.is_settled = Transaction.default_settled(new_type)
        txn.settlement_date = None

    for field, value in changes.items():
        setattr(txn, field, value)
    db.session.commit()

    return txn


def delete_transaction(user_id: str, txn_id: str) -> None:
    txn = _owned(user_id, txn_id)
    db.session.delete(txn)
    db.session.commit()

    logger.info("Deleted transaction %s for user %s", txn_id, user_id)


def mark_settled(user_id: str, txn_id: str) -> Transaction:
    try:
        txn = _owned(user_id, txn_id, Transaction.type.in_(DEBT_TYPES))
    except NotFoundError:
        raise NotFoundError("Transaction not found or not a borrow/lend transaction")

    # Settling twice is allowed and just moves the settlement date.
    txn.settle()
    db.session.commit()

    logger.info("Settled %s transaction %s for user %s", txn.type, txn.id, user_id)
    return txn
