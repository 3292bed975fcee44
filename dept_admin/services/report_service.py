# dept_admin/services/report_service.py
import logging
from datetime import datetime, time, timedelta

from dept_admin.extensions import db
from dept_admin.models.faculty import Faculty
from dept_admin.models.subject import Subject
from dept_admin.models.student import Student
from dept_admin.models.assigned_subject import AssignedSubject
from dept_admin.models.enrollment import StudentEnrollment
from dept_admin.utils.department import in_department
from dept_admin.utils.parsing import clean_text

logger = logging.getLogger(__name__)


class ReportFilters:
    """Optional criteria narrowing an enrollment report."""

    def __init__(self, subject_id=None, faculty_id=None, year=None,
                 semester=None, start_date=None, end_date=None):
        self.subject_id = subject_id
        self.faculty_id = faculty_id
        self.year = year
        self.semester = semester
        self.start_date = start_date
        self.end_date = end_date

    @classmethod
    def from_dict(cls, data):
        data = data or {}

        def _int(key):
            value = data.get(key)
            if value in (None, ""):
                return None
            try:
                return int(value)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid value for {key}: {value!r}")

        def _date(key):
            value = data.get(key)
            if not value:
                return None
            try:
                return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
            except ValueError:
                raise ValueError(f"Invalid date for {key}: {value!r}")

        return cls(
            subject_id=_int("subject_id"),
            faculty_id=_int("faculty_id"),
            year=_int("year"),
            semester=clean_text(data.get("semester")) or None,
            start_date=_date("start_date"),
            end_date=_date("end_date"),
        )

    def as_dict(self):
        return {
            "subject_id": self.subject_id,
            "faculty_id": self.faculty_id,
            "year": self.year,
            "semester": self.semester,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }


# =========================================================
# ENROLLMENT REPORT
# =========================================================

def _enrollment_report_query(filters: ReportFilters):
    query = (
        db.session.query(StudentEnrollment)
        .join(Student, StudentEnrollment.student_id == Student.id)
        .join(AssignedSubject, StudentEnrollment.assigned_subject_id == AssignedSubject.id)
        .join(Subject, AssignedSubject.subject_id == Subject.id)
        .join(Faculty, AssignedSubject.faculty_id == Faculty.id)
        .filter(in_department(Student.department))
    )

    if filters.subject_id:
        query = query.filter(AssignedSubject.subject_id == filters.subject_id)

    if filters.faculty_id:
        query = query.filter(AssignedSubject.faculty_id == filters.faculty_id)

    if filters.year:
        query = query.filter(Subject.year == filters.year)

    if filters.semester:
        query = query.filter(Subject.semester == filters.semester)

    if filters.start_date:
        query = query.filter(StudentEnrollment.enrolled_at >= datetime.combine(filters.start_date, time.min))

    if filters.end_date:
        # inclusive of the whole end day
        query = query.filter(StudentEnrollment.enrolled_at < datetime.combine(filters.end_date + timedelta(days=1), time.min))

    return query.order_by(Student.full_name, Subject.name)


def generate_enrollment_report(filters: ReportFilters):
    enrollments = _enrollment_report_query(filters).all()

    rows = [
        {
            "student_name": e.student.full_name,
            "student_regd_number": e.student.regd_number,
            "student_email": e.student.email,
            "student_year": e.student.year,
            "subject_name": e.assigned_subject.subject.name,
            "faculty_name": e.assigned_subject.faculty.name,
            "faculty_email": e.assigned_subject.faculty.email,
            "semester": e.assigned_subject.subject.semester or "",
            "enrollment_date": e.enrolled_at.isoformat() if e.enrolled_at else None,
        }
        for e in enrollments
    ]

    logger.info(f"Enrollment report with filters {filters.as_dict()} returned {len(rows)} row(s)")
    return rows


def get_empty_report_debug(filters: ReportFilters):
    """What the department holds, to explain an empty report."""
    return {
        "total_students": Student.query.filter(in_department(Student.department)).count(),
        "total_enrollments": (
            db.session.query(StudentEnrollment)
            .join(Student, StudentEnrollment.student_id == Student.id)
            .filter(in_department(Student.department))
            .count()
        ),
        "available_subjects": [
            {"subject_id": s.id, "name": s.name, "year": s.year, "semester": s.semester}
            for s in Subject.query.filter(in_department(Subject.department)).all()
        ],
        "available_faculty": [
            {"faculty_id": f.id, "name": f.name}
            for f in Faculty.query.filter(in_department(Faculty.department)).all()
        ],
        "applied_filters": filters.as_dict(),
    }


# =========================================================
# DATABASE OVERVIEW
# =========================================================

def get_database_overview():
    department_enrollments = (
        db.session.query(StudentEnrollment)
        .join(Student, StudentEnrollment.student_id == Student.id)
        .filter(in_department(Student.department))
    )

    sample_enrollments = department_enrollments.limit(3).all()

    return {
        "total_students": Student.query.count(),
        "department_students": Student.query.filter(in_department(Student.department)).count(),
        "total_enrollments": StudentEnrollment.query.count(),
        "department_enrollments": department_enrollments.count(),
        "total_subjects": Subject.query.count(),
        "department_subjects": Subject.query.filter(in_department(Subject.department)).count(),
        "total_faculty": Faculty.query.count(),
        "department_faculty": Faculty.query.filter(in_department(Faculty.department)).count(),
        "total_assigned_subjects": AssignedSubject.query.count(),
        "department_assigned_subjects": (
            db.session.query(AssignedSubject)
            .join(Subject, AssignedSubject.subject_id == Subject.id)
            .filter(in_department(Subject.department))
            .count()
        ),
        "sample_students": [
            {
                "full_name": s.full_name,
                "regd_number": s.regd_number,
                "department": s.department,
                "year": s.year,
                "email": s.email,
            }
            for s in Student.query.filter(in_department(Student.department)).limit(3).all()
        ],
        "sample_enrollments": [
            {
                "student_name": e.student.full_name,
                "student_regd_number": e.student.regd_number,
                "student_department": e.student.department,
                "subject_name": e.assigned_subject.subject.name,
                "faculty_name": e.assigned_subject.faculty.name,
                "subject_year": e.assigned_subject.subject.year,
                "subject_semester": e.assigned_subject.subject.semester,
            }
            for e in sample_enrollments
        ],
    }
