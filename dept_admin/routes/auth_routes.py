import logging

from flask import Blueprint, render_template, request, redirect, url_for, session, flash, g

from dept_admin.extensions import db
from dept_admin.models.admin import Admin
from dept_admin.services.auth_service import authenticate_admin
from dept_admin.utils.department import is_managed_department

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.before_app_request
def load_logged_in_admin():
    admin_id = session.get("admin_id")

    if admin_id is None:
        g.admin = None
        return

    admin = db.session.get(Admin, admin_id)

    # Admin removed since login: drop the stale session
    if admin is None:
        session.clear()
        g.admin = None
        if request.endpoint != "auth.login":
            return redirect(url_for("auth.login"))
    else:
        g.admin = admin


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        email = (request.form.get("email") or "").strip()
        password = request.form.get("password") or ""

        if not email or not password:
            return render_template("login.html", error="Email and password are required", email=email), 400

        admin = authenticate_admin(email, password)
        if not admin:
            return render_template("login.html", error="Invalid admin credentials!", email=email), 401

        # --- SESSION SETUP ---
        session.clear()
        session["admin_id"] = admin.id
        session["admin_email"] = admin.email
        session["admin_department"] = admin.department

        if is_managed_department(admin.department):
            return redirect(url_for("admin.department_dashboard"))
        return redirect(url_for("admin.main_dashboard"))

    return render_template("login.html")


@auth_bp.route("/logout")
def logout():
    email = session.get("admin_email")
    if email:
        logger.info(f"Admin {email} ({session.get('admin_department')}) logged out")

    session.clear()
    flash("Logged out successfully", "success")
    return redirect(url_for("auth.login"))
