# backend/auth/services.py

from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict, Optional

from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash, check_password_hash

from models import db, utcnow, isoformat
from models.user_model import User
from models.category_model import Category
from utils.errors import ConflictError, InvalidCredentials, NotFoundError

logger = logging.getLogger(__name__)


class AuthService:
    """
    Contract shared by the persistent and demo authentication strategies.
    Every method returns plain dicts ready to be put in a response.
    """

    mode = ""

    def register(self, data) -> dict:
        raise NotImplementedError

    def login(self, data) -> dict:
        raise NotImplementedError

    def get_profile(self, user_id: str, claims: dict) -> dict:
        raise NotImplementedError

    def update_profile(self, user_id: str, claims: dict, data) -> dict:
        raise NotImplementedError


# -------------------------
# Database-backed users
# -------------------------

class DatabaseAuthService(AuthService):
    mode = "database"

    def _issue_token(self, user: User) -> str:
        return create_access_token(
            identity=user.id,
            expires_delta=current_app.config["JWT_ACCESS_TOKEN_EXPIRES"],
        )

    def register(self, data) -> dict:
        existing = User.query.filter_by(email=data.email).first()
        if existing:
            raise ConflictError()

        user = User(
            name=data.name,
            email=data.email,
            password=generate_password_hash(data.password),
        )
        # user row and its starter categories are committed together
        try:
            db.session.add(user)
            db.session.flush()
            db.session.add_all(Category.defaults_for(user.id))
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError()

        logger.info("Registered user %s", user.id)
        return {"token": self._issue_token(user), "user": user.to_profile(include_created=False)}

    def login(self, data) -> dict:
        user = User.query.filter_by(email=data.email).first()

        if not user:
            logger.info("Login failed: unknown email")
            raise InvalidCredentials()

        if not check_password_hash(user.password, data.password):
            logger.info("Login failed: bad password for user %s", user.id)
            raise InvalidCredentials()

        return {"token": self._issue_token(user), "user": user.to_profile(include_created=False)}

    def get_profile(self, user_id: str, claims: dict) -> dict:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return {"user": user.to_profile()}

    def update_profile(self, user_id: str, claims: dict, data) -> dict:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        if data.name:
            user.name = data.name
        if data.avatar is not None:
            user.avatar = data.avatar
        db.session.commit()

        return {"user": user.to_profile()}


# -------------------------
# Demo mode (no persistence)
# -------------------------

DEMO_NAMESPACE = uuid.UUID("6f0c1f0e-5d1b-4c59-9a52-8f9cf0f1d7a1")


def demo_user_id(email: str) -> str:
    # Stable per email so a token outlives a process restart.
    return uuid.uuid5(DEMO_NAMESPACE, email).hex


class DemoUserStore:
    """
    Process-local email -> profile map.

    Lives as long as the Flask app that owns it; nothing is written to disk,
    so every entry is gone after a restart.
    """

    def __init__(self):
        self._users: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def get(self, email: str) -> Optional[dict]:
        with self._lock:
            user = self._users.get(email)
            return dict(user) if user else None

    def put(self, email: str, name: str, avatar: str = "") -> dict:
        user = {
            "id": demo_user_id(email),
            "name": name,
            "email": email,
            "avatar": avatar,
            "createdAt": isoformat(utcnow()),
        }
        with self._lock:
            self._users[email] = user
        return dict(user)

    def get_or_create(self, email: str, name: str) -> dict:
        with self._lock:
            user = self._users.get(email)
            if user is None:
                user = {
                    "id": demo_user_id(email),
                    "name": name,
                    "email": email,
                    "avatar": "",
                    "createdAt": isoformat(utcnow()),
                }
                self._users[email] = user
            return dict(user)

    def update(self, email: str, **fields) -> Optional[dict]:
        with self._lock:
            user = self._users.get(email)
            if user is None:
                return None
            user.update({k: v for k, v in fields.items() if v is not None})
            return dict(user)

    def clear(self) -> None:
        with self._lock:
            self._users.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)


def _public(user: dict) -> dict:
    return {k: user[k] for k in ("id", "name", "email", "avatar")}


class DemoAuthService(AuthService):
    """Accepts any password; the token itself carries the profile."""

    mode = "demo"

    def __init__(self, store: Optional[DemoUserStore] = None):
        self.store = store if store is not None else DemoUserStore()

    def _issue_token(self, user: dict) -> str:
        return create_access_token(
            identity=user["id"],
            additional_claims={"email": user["email"], "name": user["name"]},
            expires_delta=current_app.config["DEMO_TOKEN_EXPIRES"],
        )

    def register(self, data) -> dict:
        user = self.store.put(data.email, data.name)
        return {"token": self._issue_token(user), "user": _public(user)}

    def login(self, data) -> dict:
        user = self.store.get_or_create(data.email, data.email.split("@")[0])
        return {"token": self._issue_token(user), "user": _public(user)}

    def get_profile(self, user_id: str, claims: dict) -> dict:
        email = claims.get("email") or ""
        stored = self.store.get(email) or {}
        return {
            "user": {
                "id": user_id,
                "name": claims.get("name") or "Demo User",
                "email": email,
                "avatar": stored.get("avatar", ""),
                "createdAt": stored.get("createdAt"),
            }
        }

    def update_profile(self, user_id: str, claims: dict, data) -> dict:
        email = claims.get("email") or ""
        user = self.store.get_or_create(email, claims.get("name") or "Demo User")
        user = self.store.update(email, name=data.name or None, avatar=data.avatar) or user
        return {"token": self._issue_token(user), "user": user}


def build_auth_service(mode: str) -> AuthService:
    if mode == "demo":
        logger.warning("AUTH_MODE=demo: users are kept in memory and any password is accepted")
        return DemoAuthService()
    if mode != "database":
        raise ValueError(f"Unknown AUTH_MODE {mode!r}")
    return DatabaseAuthService()


def get_auth_service() -> AuthService:
    return current_app.extensions["auth_service"]
