from werkzeug.security import generate_password_hash, check_password_hash

from dept_admin.extensions import db
from dept_admin.utils.timezone import get_local_time


class Admin(db.Model):
    __tablename__ = "admins"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(100), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    department = db.Column(db.String(50), nullable=False)

    created_date = db.Column(db.DateTime, default=get_local_time, nullable=False)
    last_login = db.Column(db.DateTime, nullable=True)

    def set_password(self, raw_password):
        self.password = generate_password_hash(raw_password)

    def check_password(self, raw_password):
        return check_password_hash(self.password, raw_password)
