from functools import wraps
from flask import g, jsonify
from security.session import get_session_from_request
from models import db
from models.admin_user import AdminUser

def load_current_admin():
    sess = get_session_from_request()
    if not sess:
        g.admin = None
        g.session = None
        return
    admin = db.session.get(AdminUser, sess.admin_id)
    if admin is None or not admin.is_active:
        g.admin = None
        g.session = None
        return
    g.session = sess
    g.admin = admin

def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "admin", None) is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper
