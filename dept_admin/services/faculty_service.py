# dept_admin/services/faculty_service.py
import logging

from sqlalchemy import func

from dept_admin.extensions import db
from dept_admin.models.faculty import Faculty
from dept_admin.models.subject import Subject
from dept_admin.models.assigned_subject import AssignedSubject
from dept_admin.models.enrollment import StudentEnrollment
from dept_admin.utils.department import in_department, managed_department
from dept_admin.utils.parsing import clean_text, parse_id_list

logger = logging.getLogger(__name__)


# =========================================================
# READ
# =========================================================

def get_department_faculty():
    return (
        Faculty.query
        .filter(in_department(Faculty.department))
        .order_by(Faculty.name)
        .all()
    )


def enrollment_counts(assigned_subject_ids) -> dict:
    """assigned_subject_id -> number of enrollments"""
    if not assigned_subject_ids:
        return {}
    rows = (
        db.session.query(StudentEnrollment.assigned_subject_id, func.count(StudentEnrollment.id))
        .filter(StudentEnrollment.assigned_subject_id.in_(assigned_subject_ids))
        .group_by(StudentEnrollment.assigned_subject_id)
        .all()
    )
    return {assigned_id: count for assigned_id, count in rows}


def get_faculty_with_assignments():
    """
    Department faculty with the department subjects they teach and
    the enrollment count of each offering.
    """
    faculty = get_department_faculty()

    assignments = (
        db.session.query(AssignedSubject)
        .join(Subject, AssignedSubject.subject_id == Subject.id)
        .filter(
            AssignedSubject.faculty_id.in_([f.id for f in faculty]),
            in_department(Subject.department)
        )
        .all()
    ) if faculty else []

    counts = enrollment_counts([a.id for a in assignments])

    by_faculty = {}
    for a in assignments:
        by_faculty.setdefault(a.faculty_id, []).append({
            "assigned_subject_id": a.id,
            "subject_id": a.subject_id,
            "subject_name": a.subject.name,
            "year": a.subject.year,
            "semester": a.subject.semester or "",
            "enrollment_count": counts.get(a.id, 0),
        })

    result = []
    for f in faculty:
        subjects = by_faculty.get(f.id, [])
        result.append({
            "faculty_id": f.id,
            "name": f.name,
            "email": f.email,
            "department": f.department,
            "assigned_subjects": subjects,
            "total_enrollments": sum(s["enrollment_count"] for s in subjects),
        })
    return result


def get_department_faculty_member(faculty_id: int) -> Faculty:
    faculty = (
        Faculty.query
        .filter(Faculty.id == faculty_id, in_department(Faculty.department))
        .first()
    )
    if not faculty:
        raise ValueError("Faculty not found")
    return faculty


# =========================================================
# CREATE / UPDATE
# =========================================================

def add_faculty(name, email, password, subject_ids=None) -> Faculty:
    name = clean_text(name)
    email = clean_text(email)

    if not name or not email:
        raise ValueError("Faculty name and email are required")
    if len(name) > 100 or len(email) > 100:
        raise ValueError("Name and email cannot exceed 100 characters")

    password = "" if password is None else str(password)
    if not password:
        raise ValueError("Password is required")

    if Faculty.query.filter_by(email=email).first():
        raise ValueError("Faculty with this email already exists")

    subjects = []
    if subject_ids:
        wanted = parse_id_list(subject_ids, "subject")
        subjects = (
            Subject.query
            .filter(Subject.id.in_(wanted), in_department(Subject.department))
            .all()
        )
        if len(subjects) != len(wanted):
            raise ValueError("One or more subjects not found or do not belong to the department")

    department = managed_department()
    faculty = Faculty(name=name, email=email, department=department)
    faculty.set_password(password)
    db.session.add(faculty)
    db.session.flush()  # faculty.id

    for subject in subjects:
        db.session.add(AssignedSubject(
            faculty_id=faculty.id,
            subject_id=subject.id,
            department=department,
            year=subject.year,
            selected_count=0
        ))

    db.session.commit()

    logger.info(f"Faculty {faculty.name} <{faculty.email}> added with {len(subjects)} subject(s)")
    return faculty


def update_faculty(faculty_id, name, email, password=None) -> Faculty:
    faculty = get_department_faculty_member(faculty_id)

    name = clean_text(name)
    email = clean_text(email)
    if not name or not email:
        raise ValueError("Faculty name and email are required")

    taken = Faculty.query.filter(Faculty.email == email, Faculty.id != faculty.id).first()
    if taken:
        raise ValueError("Faculty with this email already exists")

    faculty.name = name
    faculty.email = email
    if password:
        faculty.set_password(str(password))

    db.session.commit()

    logger.info(f"Faculty {faculty.id} updated")
    return faculty


# =========================================================
# DELETE (SAFE)
# =========================================================

def faculty_has_enrollments(faculty_id: int) -> bool:
    return db.session.query(
        StudentEnrollment.query
        .join(AssignedSubject, StudentEnrollment.assigned_subject_id == AssignedSubject.id)
        .filter(AssignedSubject.faculty_id == faculty_id)
        .exists()
    ).scalar()


def delete_faculty(faculty_id: int):
    faculty = get_department_faculty_member(faculty_id)

    if faculty_has_enrollments(faculty.id):
        raise ValueError("Cannot delete faculty with active student enrollments")

    name = faculty.name
    # assignments go with the faculty (delete-orphan cascade)
    db.session.delete(faculty)
    db.session.commit()

    logger.info(f"Faculty {faculty_id} ({name}) deleted")
