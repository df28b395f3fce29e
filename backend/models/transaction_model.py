import json

from models import db, new_id, utcnow, isoformat


TRANSACTION_TYPES = ("income", "expense", "borrow", "lend")
TRANSACTION_STATUSES = ("pending", "completed", "cancelled")

# Types that carry a counterparty and can be settled.
DEBT_TYPES = ("borrow", "lend")


def is_debt_type(txn_type: str | None) -> bool:
    return txn_type in DEBT_TYPES


class Transaction(db.Model):
    """
    A single money movement owned by one user.

    Borrow/lend rows additionally track who the counterparty is, when the
    debt is due and whether it has been settled.
    """

    __tablename__ = "transactions"

    id = db.Column(db.String(32), primary_key=True, default=new_id)

    # Ownership
    user_id = db.Column(db.String(32), nullable=False)

    # Core transaction data
    type = db.Column(db.Enum(*TRANSACTION_TYPES, name="transaction_type"), nullable=False)
    category = db.Column(db.String(120), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    description = db.Column(db.String(500), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)
    status = db.Column(
        db.Enum(*TRANSACTION_STATUSES, name="transaction_status"),
        nullable=False,
        default="completed",
    )

    # Borrow / lend
    contact_person = db.Column(db.String(120), nullable=True)
    contact_phone = db.Column(db.String(40), nullable=True)
    due_date = db.Column(db.DateTime, nullable=True)
    is_settled = db.Column(db.Boolean, nullable=False, default=True)
    settlement_date = db.Column(db.DateTime, nullable=True)

    # Misc
    tags_json = db.Column(db.Text, nullable=True)
    location = db.Column(db.String(255), nullable=True)
    receipt = db.Column(db.String(500), nullable=True)  # URL to receipt image

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.Index("ix_txn_user_date", "user_id", "date"),
        db.Index("ix_txn_user_type", "user_id", "type"),
        db.Index("ix_txn_user_category", "user_id", "category"),
        db.Index("ix_txn_user_settled", "user_id", "is_settled"),
    )

    @staticmethod
    def default_settled(txn_type: str) -> bool:
        # Only debts start out open.
        return not is_debt_type(txn_type)

    @property
    def tags(self) -> list[str]:
        if not self.tags_json:
            return []
        try:
            return json.loads(self.tags_json)
        except ValueError:
            return []

    @tags.setter
    def tags(self, value) -> None:
        self.tags_json = json.dumps(list(value or []))

    def settle(self) -> None:
        self.is_settled = True
        self.settlement_date = utcnow()
        self.status = "completed"

    def to_dict(self) -> dict:
        out = {
            "_id": self.id,
            "user": self.user_id,
            "type": self.type,
            "category": self.category,
            "amount": float(self.amount or 0.0),
            "description": self.description,
            "date": isoformat(self.date),
            "status": self.status,
            "isSettled": bool(self.is_settled),
            "tags": self.tags,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        optional = {
            "contactPerson": self.contact_person,
            "contactPhone": self.contact_phone,
            "dueDate": isoformat(self.due_date),
            "settlementDate": isoformat(self.settlement_date),
            "location": self.location,
            "receipt": self.receipt,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        return out

    def to_summary(self) -> dict:
        """Compact projection used by the dashboard's recent list."""
        return {
            "_id": self.id,
            "type": self.type,
            "category": self.category,
            "amount": float(self.amount or 0.0),
            "description": self.description,
            "date": isoformat(self.date),
        }
