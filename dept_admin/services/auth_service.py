import logging

from dept_admin.extensions import db
from dept_admin.models.admin import Admin
from dept_admin.utils.timezone import get_local_time

logger = logging.getLogger(__name__)


def authenticate_admin(email: str, password: str):
    """
    Authenticate admin using email & password.
    Returns Admin object if valid, else None. A successful login
    stamps last_login.
    """
    if not email or not password:
        return None

    admin = Admin.query.filter_by(email=email.strip()).first()
    if not admin or not admin.check_password(password):
        logger.warning(f"Failed admin login for {email}")
        return None

    admin.last_login = get_local_time()
    db.session.commit()

    logger.info(f"Admin {admin.email} ({admin.department}) logged in")
    return admin
