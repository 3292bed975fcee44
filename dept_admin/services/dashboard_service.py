# dept_admin/services/dashboard_service.py
from dept_admin.extensions import db
from dept_admin.models.admin import Admin
from dept_admin.models.faculty import Faculty
from dept_admin.models.subject import Subject
from dept_admin.models.student import Student
from dept_admin.models.enrollment import StudentEnrollment
from dept_admin.utils.department import in_department


# =========================================================
# SYSTEM-WIDE
# =========================================================

def get_system_stats():
    return {
        "total_students": Student.query.count(),
        "total_faculties": Faculty.query.count(),
        "total_subjects": Subject.query.count(),
        "total_enrollments": StudentEnrollment.query.count(),
        "total_admins": Admin.query.count(),
    }


# =========================================================
# DEPARTMENT
# =========================================================

def _department_enrollments_query():
    return (
        db.session.query(StudentEnrollment)
        .join(Student, StudentEnrollment.student_id == Student.id)
        .filter(in_department(Student.department))
    )


def get_department_stats():
    return {
        "students_count": Student.query.filter(in_department(Student.department)).count(),
        "faculty_count": Faculty.query.filter(in_department(Faculty.department)).count(),
        "subjects_count": Subject.query.filter(in_department(Subject.department)).count(),
        "enrollments_count": _department_enrollments_query().count(),
    }


def get_recent_students(limit=5):
    students = (
        Student.query
        .filter(in_department(Student.department))
        .order_by(Student.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "full_name": s.full_name,
            "email": s.email,
            "department": s.department,
            "year": s.year,
        }
        for s in students
    ]


def get_recent_enrollments(limit=10):
    enrollments = (
        _department_enrollments_query()
        .order_by(StudentEnrollment.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "student_name": e.student.full_name,
            "subject_name": e.assigned_subject.subject.name,
            "faculty_name": e.assigned_subject.faculty.name,
            "enrollment_date": e.enrolled_at.isoformat() if e.enrolled_at else None,
        }
        for e in enrollments
    ]


def get_department_system_info():
    """Counts plus recent activity, served to the dashboard over AJAX."""
    return {
        "database_stats": get_department_stats(),
        "recent_activity": {
            "recent_students": get_recent_students(),
            "recent_enrollments": get_recent_enrollments(),
        },
    }
