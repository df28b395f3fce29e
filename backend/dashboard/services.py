from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional

from sqlalchemy import func

from models import db, utcnow
from models.transaction_model import Transaction, DEBT_TYPES

PERIODS = ("week", "month", "year")
DEFAULT_PERIOD = "month"

TOP_CATEGORIES = 10
RECENT_LIMIT = 5


def period_start(period: str, now: datetime) -> datetime:
    """
    Start of the dashboard window; the window always runs up to now.

    week  -> trailing 7 days
    month -> first day of the current calendar month
    year  -> January 1 of the current year
    Anything else is treated as month.
    """
    if period == "week":
        return now - timedelta(days=7)
    if period == "year":
        return datetime(now.year, 1, 1)
    return datetime(now.year, now.month, 1)


def _money(value) -> float:
    return round(float(value or 0.0), 2)


def _totals_by_key(rows: Iterable) -> Dict[str, dict]:
    return {key: {"total": _money(total), "count": count} for key, total, count in rows}


def _empty() -> dict:
    return {"total": 0, "count": 0}


def get_dashboard(user_id: str, period: Optional[str] = None, now: Optional[datetime] = None) -> dict:
    period = period or DEFAULT_PERIOD
    now = now or utcnow()
    start = period_start(period, now)

    amount_sum = func.sum(Transaction.amount)
    row_count = func.count(Transaction.id)
    in_window = (Transaction.user_id == user_id, Transaction.date >= start)

    # 1) income / expense / borrow / lend totals inside the window
    by_type = _totals_by_key(
        db.session.query(Transaction.type, amount_sum, row_count)
        .filter(*in_window)
        .group_by(Transaction.type)
        .all()
    )

    # 2) top expense categories inside the window
    category_total = amount_sum.label("total_amount")
    category_rows = (
        db.session.query(Transaction.category, category_total, row_count)
        .filter(*in_window, Transaction.type == "expense")
        .group_by(Transaction.category)
        .order_by(category_total.desc())
        .limit(TOP_CATEGORIES)
        .all()
    )
    expenses_by_category = [
        {"_id": category, "totalAmount": _money(total), "count": count}
        for category, total, count in category_rows
    ]

    # 3) open debts, regardless of period
    outstanding = _totals_by_key(
        db.session.query(Transaction.type, amount_sum, row_count)
        .filter(
            Transaction.user_id == user_id,
            Transaction.type.in_(DEBT_TYPES),
            Transaction.is_settled.is_(False),
        )
        .group_by(Transaction.type)
        .all()
    )

    # 4) latest activity, regardless of period
    recent = (
        Transaction.query.filter(Transaction.user_id == user_id)
        .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        .limit(RECENT_LIMIT)
        .all()
    )

    income = by_type.get("income") or _empty()
    expenses = by_type.get("expense") or _empty()

    return {
        "period": period,
        "income": income,
        "expenses": expenses,
        "balance": _money(income["total"] - expenses["total"]),
        "borrowing": outstanding.get("borrow") or _empty(),
        "lending": outstanding.get("lend") or _empty(),
        "expensesByCategory": expenses_by_category,
        "recentTransactions": [t.to_summary() for t in recent],
    }
