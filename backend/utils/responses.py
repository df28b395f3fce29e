from __future__ import annotations

import math
from typing import Any, Optional

from flask import jsonify


def ok(data: Any = None, message: Optional[str] = None, status: int = 200, **extra):
    """Success envelope: {success, message?, data?, ...extra}."""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
