from functools import wraps
from flask import session, redirect, url_for, flash, jsonify

from dept_admin.utils.department import is_managed_department


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if "admin_id" not in session:
            flash("Please login to access the admin dashboard.", "danger")
            return redirect(url_for("auth.login"))
        return view(*args, **kwargs)
    return wrapped


def department_required(json=False):
    """
    Admin must be logged in AND belong to the managed department.
    JSON endpoints answer 401 instead of redirecting.
    """
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            allowed = (
                "admin_id" in session
                and is_managed_department(session.get("admin_department"))
            )
            if not allowed:
                if json:
                    return jsonify({"success": False, "message": "Unauthorized access"}), 401
                flash("Access denied. Department administrators only.", "danger")
                return redirect(url_for("auth.login"))

            return view(*args, **kwargs)
        return wrapped
    return decorator
