# dept_admin/services/assignment_service.py
import logging

from sqlalchemy.sql import exists

from dept_admin.extensions import db
from dept_admin.models.faculty import Faculty
from dept_admin.models.subject import Subject
from dept_admin.models.assigned_subject import AssignedSubject
from dept_admin.models.enrollment import StudentEnrollment
from dept_admin.services.subject_service import get_department_subject
from dept_admin.utils.department import in_department, managed_department
from dept_admin.utils.parsing import parse_id_list

logger = logging.getLogger(__name__)


def can_remove_assignment(assigned_subject_id: int) -> bool:
    """
    An offering can be removed ONLY if no student is enrolled in it.
    """
    return not db.session.query(
        exists().where(StudentEnrollment.assigned_subject_id == assigned_subject_id)
    ).scalar()


# =========================================================
# ASSIGN (replace the faculty set of a subject)
# =========================================================

def assign_faculty_to_subject(subject_id: int, faculty_ids):
    """
    Makes `faculty_ids` the exact set of faculty teaching the subject.
    Offerings of faculty that stay keep their enrollments; offerings being
    dropped must have none.
    """
    subject = get_department_subject(subject_id)
    wanted = parse_id_list(faculty_ids, "faculty")

    faculty = (
        Faculty.query
        .filter(Faculty.id.in_(wanted), in_department(Faculty.department))
        .all()
    ) if wanted else []

    if len(faculty) != len(wanted):
        raise ValueError("One or more faculty members not found or do not belong to the department")

    existing = AssignedSubject.query.filter_by(subject_id=subject.id).all()
    existing_by_faculty = {a.faculty_id: a for a in existing}

    to_remove = [a for a in existing if a.faculty_id not in wanted]
    blocked = [a for a in to_remove if not can_remove_assignment(a.id)]
    if blocked:
        names = ", ".join(sorted(a.faculty.name for a in blocked))
        raise ValueError(f"Cannot remove assignment with active student enrollments ({names})")

    for assignment in to_remove:
        db.session.delete(assignment)

    department = managed_department()
    added = 0
    for f in faculty:
        if f.id in existing_by_faculty:
            continue
        db.session.add(AssignedSubject(
            faculty_id=f.id,
            subject_id=subject.id,
            department=department,
            year=subject.year,
            selected_count=0
        ))
        added += 1

    db.session.commit()

    logger.info(
        f"Faculty assignments updated for subject {subject.name}: "
        f"{added} added, {len(to_remove)} removed"
    )
    return subject


# =========================================================
# REMOVE
# =========================================================

def remove_faculty_assignment(assigned_subject_id: int):
    assignment = (
        db.session.query(AssignedSubject)
        .join(Subject, AssignedSubject.subject_id == Subject.id)
        .filter(AssignedSubject.id == assigned_subject_id, in_department(Subject.department))
        .first()
    )
    if not assignment:
        raise LookupError("Assignment not found")

    if not can_remove_assignment(assignment.id):
        raise ValueError("Cannot remove assignment with active student enrollments")

    faculty_name = assignment.faculty.name
    subject_name = assignment.subject.name

    db.session.delete(assignment)
    db.session.commit()

    logger.info(f"Faculty {faculty_name} unassigned from subject {subject_name}")


# =========================================================
# LOOKUPS
# =========================================================

def get_available_faculty_for_subject(subject_id: int):
    subject = get_department_subject(subject_id)

    faculty = (
        Faculty.query
        .filter(in_department(Faculty.department))
        .order_by(Faculty.name)
        .all()
    )
    assigned = {
        fid for (fid,) in
        db.session.query(AssignedSubject.faculty_id)
        .filter(AssignedSubject.subject_id == subject.id)
        .all()
    }
    return [
        {
            "faculty_id": f.id,
            "name": f.name,
            "email": f.email,
            "is_assigned": f.id in assigned,
        }
        for f in faculty
    ]


def get_faculty_by_subject(subject_id: int):
    """Distinct faculty teaching a department subject, by name."""
    rows = (
        db.session.query(Faculty.id, Faculty.name, Faculty.email)
        .join(AssignedSubject, AssignedSubject.faculty_id == Faculty.id)
        .join(Subject, AssignedSubject.subject_id == Subject.id)
        .filter(AssignedSubject.subject_id == subject_id, in_department(Subject.department))
        .distinct()
        .order_by(Faculty.name)
        .all()
    )
    return [
        {"faculty_id": fid, "name": name, "email": email}
        for fid, name, email in rows
    ]
