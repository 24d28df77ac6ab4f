from datetime import datetime

from flask import Blueprint, request, jsonify, g

from models import db
from models.admin_user import AdminUser
from security.password import verify_password
from security.rate_limit import rate_limited
from security.session import bearer_token, create_session, revoke_session, revoke_all_sessions
from utils.audit import log_event
from utils.auth_context import admin_required


auth_bp = Blueprint("auth", __name__, url_prefix="/api/admin/auth")


@auth_bp.post("/login")
@rate_limited("login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    admin = AdminUser.query.filter_by(email=email).first()
    if not admin or not admin.is_active or not verify_password(password, admin.password_hash):
        log_event("ADMIN_LOGIN_FAIL", admin_id=admin.id if admin else None, metadata={"email": email})
        return jsonify(error="Invalid credentials"), 401

    # Rotate: one live session per admin
    revoked_count = revoke_all_sessions(admin.id)
    raw_token = create_session(admin.id)

    admin.last_login_at = datetime.utcnow()
    db.session.commit()

    log_event("ADMIN_LOGIN", admin_id=admin.id, metadata={"revoked_sessions": revoked_count})
    return jsonify(message="Logged in", token=raw_token), 200


@auth_bp.get("/me")
@admin_required
def me():
    return jsonify(id=g.admin.id, email=g.admin.email, full_name=g.admin.full_name), 200


@auth_bp.post("/logout")
@admin_required
def logout():
    revoke_session(bearer_token())
    log_event("ADMIN_LOGOUT", admin_id=g.admin.id)
    return jsonify(message="Logged out"), 200
