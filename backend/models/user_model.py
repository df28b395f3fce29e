# backend/models/user_model.py

from models import db, new_id, utcnow, isoformat


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(150), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    avatar = db.Column(db.String(500), nullable=False, default="")
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_profile(self, include_created: bool = True) -> dict:
        profile = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar or "",
        }
        if include_created:
            profile["createdAt"] = isoformat(self.created_at)
        return profile
