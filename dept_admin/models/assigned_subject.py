from dept_admin.extensions import db


class AssignedSubject(db.Model):
    """One faculty member's offering of one subject."""
    __tablename__ = "assigned_subjects"

    id = db.Column(db.Integer, primary_key=True)
    faculty_id = db.Column(
        db.Integer,
        db.ForeignKey("faculties.id", ondelete="CASCADE"),
        nullable=False
    )
    subject_id = db.Column(
        db.Integer,
        db.ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False
    )
    department = db.Column(db.String(50), nullable=False)
    year = db.Column(db.Integer, nullable=False, default=1)
    selected_count = db.Column(db.Integer, nullable=False, default=0)

    faculty = db.relationship("Faculty", back_populates="assigned_subjects")
    subject = db.relationship("Subject", back_populates="assigned_subjects")

    enrollments = db.relationship(
        "StudentEnrollment",
        back_populates="assigned_subject",
        cascade="all, delete-orphan"
    )
