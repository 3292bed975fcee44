from dept_admin.extensions import db
from dept_admin.utils.timezone import get_local_time


class StudentEnrollment(db.Model):
    __tablename__ = "student_enrollments"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(
        db.String(50),
        db.ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False
    )
    assigned_subject_id = db.Column(
        db.Integer,
        db.ForeignKey("assigned_subjects.id", ondelete="CASCADE"),
        nullable=False
    )
    enrolled_at = db.Column(db.DateTime, default=get_local_time, nullable=False)

    student = db.relationship("Student", back_populates="enrollments")
    assigned_subject = db.relationship("AssignedSubject", back_populates="enrollments")
