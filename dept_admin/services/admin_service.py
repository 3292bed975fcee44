import logging

from dept_admin.extensions import db
from dept_admin.models.admin import Admin
from dept_admin.utils.parsing import clean_text

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def seed_admin(email: str, password: str, department: str):
    """
    Creates the admin account if no admin with that email exists.
    Returns (admin, created).
    """
    admin = Admin.query.filter_by(email=email).first()
    if admin:
        return admin, False

    admin = Admin(email=email, department=department)
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()

    logger.info(f"Seeded admin {email} for {department}")
    return admin, True


def get_admin(admin_id: int) -> Admin:
    return Admin.query.get_or_404(admin_id)


def update_admin_profile(admin_id: int, email: str, department: str) -> Admin:
    admin = Admin.query.get_or_404(admin_id)

    email = clean_text(email)
    department = clean_text(department)
    if not email or not department:
        raise ValueError("Email and department are required.")

    taken = Admin.query.filter(Admin.email == email, Admin.id != admin_id).first()
    if taken:
        raise ValueError("An admin with this email already exists.")

    admin.email = email
    admin.department = department
    db.session.commit()

    logger.info(f"Admin {admin_id} profile updated ({email}, {department})")
    return admin


def change_admin_password(admin_id: int, current_password: str, new_password: str, confirm_password: str):
    admin = Admin.query.get_or_404(admin_id)
    current_password, new_password, confirm_password = (
        "" if p is None else str(p) for p in (current_password, new_password, confirm_password)
    )

    if not current_password or not new_password or not confirm_password:
        raise ValueError("All password fields are required.")

    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if new_password != confirm_password:
        raise ValueError("New password and confirmation password do not match")

    if not admin.check_password(current_password):
        raise ValueError("Current password is incorrect.")

    admin.set_password(new_password)
    db.session.commit()

    logger.info(f"Admin {admin.email} changed password")
