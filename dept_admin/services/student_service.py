# dept_admin/services/student_service.py
import logging
import re

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from dept_admin.extensions import db
from dept_admin.models.student import Student
from dept_admin.models.subject import Subject
from dept_admin.models.assigned_subject import AssignedSubject
from dept_admin.models.enrollment import StudentEnrollment
from dept_admin.utils.department import in_department, managed_department
from dept_admin.utils.parsing import clean_text, parse_bool

logger = logging.getLogger(__name__)

REGD_NUMBER_PATTERN = re.compile(r"^[A-Z0-9]{1,10}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SORT_COLUMNS = {
    "regdnumber": Student.regd_number,
    "email": Student.email,
    "year": Student.year,
}


# =========================================================
# READ
# =========================================================

def _department_students_query():
    return (
        Student.query
        .options(
            selectinload(Student.enrollments)
            .selectinload(StudentEnrollment.assigned_subject)
            .selectinload(AssignedSubject.subject),
            selectinload(Student.enrollments)
            .selectinload(StudentEnrollment.assigned_subject)
            .selectinload(AssignedSubject.faculty),
        )
        .filter(in_department(Student.department))
    )


def serialize_student(student: Student) -> dict:
    return {
        "student_id": student.id,
        "full_name": student.full_name,
        "regd_number": student.regd_number,
        "email": student.email,
        "year": student.year,
        "department": student.department,
        "total_enrollments": len(student.enrollments),
        "enrolled_subjects": [
            {
                "enrollment_id": e.id,
                "subject_id": e.assigned_subject.subject_id,
                "subject_name": e.assigned_subject.subject.name,
                "faculty_name": e.assigned_subject.faculty.name,
                "semester": e.assigned_subject.subject.semester or "",
                "year": e.assigned_subject.subject.year,
            }
            for e in student.enrollments
        ],
    }


def get_department_students():
    students = _department_students_query().order_by(Student.full_name).all()
    return [serialize_student(s) for s in students]


def filter_students(search_text=None, year=None, semester=None,
                    has_enrollments=None, sort_by="fullname", sort_order="ASC"):
    """
    Department students narrowed by free-text search, year, the semester of
    any enrolled subject and whether they have enrollments at all.
    """
    query = _department_students_query()

    search_text = clean_text(search_text)
    if search_text:
        pattern = f"%{search_text}%"
        query = query.filter(or_(
            Student.full_name.ilike(pattern),
            Student.email.ilike(pattern),
            Student.regd_number.ilike(pattern),
        ))

    year = clean_text(year)
    if year:
        query = query.filter(Student.year == year)

    semester = clean_text(semester)
    if semester:
        query = query.filter(Student.enrollments.any(
            StudentEnrollment.assigned_subject.has(
                AssignedSubject.subject.has(Subject.semester == semester)
            )
        ))

    if has_enrollments is True:
        query = query.filter(Student.enrollments.any())
    elif has_enrollments is False:
        query = query.filter(~Student.enrollments.any())

    column = SORT_COLUMNS.get(clean_text(sort_by).lower(), Student.full_name)
    if clean_text(sort_order).upper() == "DESC":
        query = query.order_by(column.desc())
    else:
        query = query.order_by(column.asc())

    return [serialize_student(s) for s in query.all()]


def filter_students_by(data):
    """filter_students driven by request data (JSON body or form fields)."""
    return filter_students(
        search_text=data.get("search_text"),
        year=data.get("year"),
        semester=data.get("semester"),
        has_enrollments=parse_bool(data.get("has_enrollments")),
        sort_by=data.get("sort_by") or "fullname",
        sort_order=data.get("sort_order") or "ASC"
    )


def get_department_student(student_id: str) -> Student:
    return (
        Student.query
        .filter(Student.id == student_id, in_department(Student.department))
        .first_or_404()
    )


# =========================================================
# CREATE / UPDATE
# =========================================================

def _clean_student_fields(full_name, regd_number, email, year):
    full_name = clean_text(full_name)
    regd_number = clean_text(regd_number).upper()
    email = clean_text(email)
    year = clean_text(year)

    if not all([full_name, regd_number, email, year]):
        raise ValueError("Full name, registration number, email and year are required.")

    if not REGD_NUMBER_PATTERN.match(regd_number):
        raise ValueError("Registration number must be up to 10 uppercase letters and digits.")

    if not EMAIL_PATTERN.match(email):
        raise ValueError("Please enter a valid email address.")

    return full_name, regd_number, email, year


def _check_unique(email, regd_number, exclude_id=None):
    query = Student.query.filter(or_(Student.email == email, Student.regd_number == regd_number))
    if exclude_id is not None:
        query = query.filter(Student.id != exclude_id)

    existing = query.first()
    if not existing:
        return

    errors = []
    if existing.email == email:
        errors.append("A student with this email already exists.")
    if existing.regd_number == regd_number:
        errors.append("A student with this registration number already exists.")
    raise ValueError(" ".join(errors))


def add_student(full_name, regd_number, email, year, password=None) -> Student:
    full_name, regd_number, email, year = _clean_student_fields(full_name, regd_number, email, year)
    _check_unique(email, regd_number)

    if db.session.get(Student, regd_number):
        raise ValueError("A student with this registration number already exists.")

    student = Student(
        id=regd_number,
        full_name=full_name,
        regd_number=regd_number,
        email=email,
        year=year,
        department=managed_department()
    )
    student.set_password(password or current_app.config["DEFAULT_STUDENT_PASSWORD"])

    db.session.add(student)
    db.session.commit()

    logger.info(f"Student {student.id} ({student.full_name}) added")
    return student


def update_student(student_id, full_name, regd_number, email, year, password=None) -> Student:
    student = get_department_student(student_id)

    full_name, regd_number, email, year = _clean_student_fields(full_name, regd_number, email, year)
    _check_unique(email, regd_number, exclude_id=student.id)

    student.full_name = full_name
    student.regd_number = regd_number
    student.email = email
    student.year = year

    if password:
        student.set_password(password)

    db.session.commit()

    logger.info(f"Student {student.id} updated")
    return student


# =========================================================
# DELETE
# =========================================================

def delete_student(student_id: str):
    student = (
        Student.query
        .filter(Student.id == student_id, in_department(Student.department))
        .first()
    )
    if not student:
        raise ValueError("Student not found")

    enrollment_count = len(student.enrollments)

    # enrollments go with the student (delete-orphan cascade)
    db.session.delete(student)
    db.session.commit()

    logger.info(f"Student {student_id} deleted with {enrollment_count} enrollment(s)")
