from werkzeug.security import generate_password_hash, check_password_hash

from dept_admin.extensions import db


class Student(db.Model):
    __tablename__ = "students"

    # Registration number doubles as the primary key
    id = db.Column(db.String(50), primary_key=True)
    full_name = db.Column(db.String(150), nullable=False)
    regd_number = db.Column(db.String(10), unique=True, nullable=False)
    year = db.Column(db.String(20), nullable=False)
    department = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(150), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)

    enrollments = db.relationship(
        "StudentEnrollment",
        back_populates="student",
        cascade="all, delete-orphan"
    )

    def set_password(self, raw_password):
        self.password = generate_password_hash(raw_password)

    def check_password(self, raw_password):
        return check_password_hash(self.password, raw_password)
