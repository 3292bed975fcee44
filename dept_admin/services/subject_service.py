# dept_admin/services/subject_service.py
import logging
from datetime import datetime, date

from dept_admin.extensions import db
from dept_admin.models.faculty import Faculty
from dept_admin.models.subject import Subject
from dept_admin.models.assigned_subject import AssignedSubject
from dept_admin.models.enrollment import StudentEnrollment
from dept_admin.services.faculty_service import enrollment_counts
from dept_admin.utils.department import in_department, managed_department
from dept_admin.utils.parsing import clean_text

logger = logging.getLogger(__name__)

AVAILABLE_YEARS = [1, 2, 3, 4]
AVAILABLE_SEMESTERS = ["Fall", "Spring", "Summer"]


# =========================================================
# SUBJECT READ OPERATIONS
# =========================================================

def get_department_subjects(order_by_name=False):
    query = Subject.query.filter(in_department(Subject.department))
    if order_by_name:
        return query.order_by(Subject.name).all()
    return query.order_by(Subject.year, Subject.name).all()


def get_department_subject(subject_id: int) -> Subject:
    subject = (
        Subject.query
        .filter(Subject.id == subject_id, in_department(Subject.department))
        .first()
    )
    if not subject:
        raise ValueError("Subject not found or does not belong to the department")
    return subject


def get_subjects_with_assignments():
    """
    Department subjects with the department faculty teaching them,
    enrollment totals and whether the semester is still running.
    """
    subjects = get_department_subjects()

    assignments = (
        db.session.query(AssignedSubject)
        .join(Faculty, AssignedSubject.faculty_id == Faculty.id)
        .filter(
            AssignedSubject.subject_id.in_([s.id for s in subjects]),
            in_department(Faculty.department)
        )
        .order_by(Faculty.name)
        .all()
    ) if subjects else []

    counts = enrollment_counts([a.id for a in assignments])

    by_subject = {}
    for a in assignments:
        by_subject.setdefault(a.subject_id, []).append({
            "faculty_id": a.faculty_id,
            "name": a.faculty.name,
            "email": a.faculty.email,
            "assigned_subject_id": a.id,
            "enrollment_count": counts.get(a.id, 0),
        })

    result = []
    for s in subjects:
        faculty = by_subject.get(s.id, [])
        result.append({
            "subject_id": s.id,
            "name": s.name,
            "department": s.department,
            "year": s.year,
            "semester": s.semester or "",
            "semester_start_date": s.semester_start_date.isoformat() if s.semester_start_date else None,
            "semester_end_date": s.semester_end_date.isoformat() if s.semester_end_date else None,
            "assigned_faculty": faculty,
            "total_enrollments": sum(f["enrollment_count"] for f in faculty),
            "is_active": s.is_active,
        })
    return result


# =========================================================
# SUBJECT CREATE / UPDATE
# =========================================================

def _parse_date(value, label):
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"{label} must be a date in YYYY-MM-DD format")


def _clean_subject_fields(name, year, semester, start_date, end_date):
    name = clean_text(name)
    semester = clean_text(semester)

    if not name:
        raise ValueError("Subject name is required")
    if len(name) > 100:
        raise ValueError("Subject name cannot exceed 100 characters")

    try:
        year = int(year)
    except (TypeError, ValueError):
        raise ValueError("Year is required")
    if year not in AVAILABLE_YEARS:
        raise ValueError("Year must be between 1 and 4")

    if not semester:
        raise ValueError("Semester is required")

    start_date = _parse_date(start_date, "Semester start date")
    end_date = _parse_date(end_date, "Semester end date")
    if start_date and end_date and end_date < start_date:
        raise ValueError("Semester end date cannot be before the start date")

    return name, year, semester, start_date, end_date


def add_subject(name, year, semester, start_date=None, end_date=None) -> Subject:
    name, year, semester, start_date, end_date = _clean_subject_fields(
        name, year, semester, start_date, end_date
    )

    subject = Subject(
        name=name,
        department=managed_department(),
        year=year,
        semester=semester,
        semester_start_date=start_date,
        semester_end_date=end_date
    )
    db.session.add(subject)
    db.session.commit()

    logger.info(f"Subject {subject.name} (year {year}, {semester}) added")
    return subject


def update_subject(subject_id, name, year, semester, start_date=None, end_date=None) -> Subject:
    subject = get_department_subject(subject_id)
    name, year, semester, start_date, end_date = _clean_subject_fields(
        name, year, semester, start_date, end_date
    )

    subject.name = name
    subject.year = year
    subject.semester = semester
    subject.semester_start_date = start_date
    subject.semester_end_date = end_date

    # offerings follow the subject's year
    for assignment in subject.assigned_subjects:
        assignment.year = year

    db.session.commit()

    logger.info(f"Subject {subject.id} updated")
    return subject


# =========================================================
# DELETE (SAFE)
# =========================================================

def subject_has_enrollments(subject_id: int) -> bool:
    return db.session.query(
        StudentEnrollment.query
        .join(AssignedSubject, StudentEnrollment.assigned_subject_id == AssignedSubject.id)
        .filter(AssignedSubject.subject_id == subject_id)
        .exists()
    ).scalar()


def delete_subject(subject_id: int):
    subject = get_department_subject(subject_id)

    if subject_has_enrollments(subject.id):
        raise ValueError(
            f"Cannot delete {subject.name}: students are enrolled in it. "
            "Remove their enrollments first."
        )

    name = subject.name
    db.session.delete(subject)
    db.session.commit()

    logger.info(f"Subject {subject_id} ({name}) deleted")
