from dept_admin.extensions import db
from dept_admin.utils.timezone import get_local_date


class Subject(db.Model):
    __tablename__ = "subjects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    department = db.Column(db.String(50), nullable=False)

    year = db.Column(db.Integer, nullable=False, default=1)
    semester = db.Column(db.String(20), nullable=False, default="")
    semester_start_date = db.Column(db.Date, nullable=True)
    semester_end_date = db.Column(db.Date, nullable=True)

    assigned_subjects = db.relationship(
        "AssignedSubject",
        back_populates="subject",
        cascade="all, delete-orphan"
    )

    @property
    def is_active(self):
        return self.semester_end_date is None or self.semester_end_date >= get_local_date()
