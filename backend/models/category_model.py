from models import db, new_id, utcnow


CATEGORY_TYPES = ("income", "expense", "both")

# Starter set created for every newly registered user.
DEFAULT_CATEGORIES = (
    # Income
    {"name": "Salary", "type": "income", "icon": "💰", "color": "#10b981"},
    {"name": "Freelance", "type": "income", "icon": "💻", "color": "#059669"},
    {"name": "Investment", "type": "income", "icon": "📈", "color": "#047857"},
    {"name": "Bonus", "type": "income", "icon": "🎁", "color": "#065f46"},
    # Expense
    {"name": "Food & Dining", "type": "expense", "icon": "🍔", "color": "#ef4444"},
    {"name": "Transportation", "type": "expense", "icon": "🚗", "color": "#f97316"},
    {"name": "Shopping", "type": "expense", "icon": "🛍️", "color": "#eab308"},
    {"name": "Entertainment", "type": "expense", "icon": "🎬", "color": "#a855f7"},
    {"name": "Bills & Utilities", "type": "expense", "icon": "🏠", "color": "#3b82f6"},
    {"name": "Healthcare", "type": "expense", "icon": "⚕️", "color": "#06b6d4"},
    {"name": "Education", "type": "expense", "icon": "📚", "color": "#8b5cf6"},
    {"name": "Travel", "type": "expense", "icon": "✈️", "color": "#ec4899"},
)


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    user_id = db.Column(db.String(32), index=True, nullable=False)

    name = db.Column(db.String(50), nullable=False)
    type = db.Column(db.Enum(*CATEGORY_TYPES, name="category_type"), nullable=False)
    icon = db.Column(db.String(16), nullable=False, default="📝")
    color = db.Column(db.String(7), nullable=False, default="#6366f1")
    is_default = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "name", name="uq_user_category_name"),
    )

    @classmethod
    def defaults_for(cls, user_id: str) -> list["Category"]:
        """Build (unsaved) rows for the default category set."""
        return [cls(user_id=user_id, is_default=True, **row) for row in DEFAULT_CATEGORIES]
