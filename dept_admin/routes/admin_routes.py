# dept_admin/routes/admin_routes.py
import logging

from flask import (jsonify, Blueprint, render_template, request,
                   redirect, url_for, flash, session)
from sqlalchemy.exc import SQLAlchemyError

from dept_admin.extensions import db
from dept_admin.utils.decorators import login_required, department_required
from dept_admin.utils.department import managed_department
from dept_admin.utils.parsing import parse_id
from dept_admin.services.admin_service import (
    get_admin,
    update_admin_profile,
    change_admin_password,
)
from dept_admin.services.dashboard_service import (
    get_system_stats,
    get_department_stats,
    get_recent_students,
    get_recent_enrollments,
    get_department_system_info,
)
from dept_admin.services.student_service import (
    get_department_students,
    get_department_student,
    filter_students_by,
    add_student,
    update_student,
    delete_student,
)
from dept_admin.services.faculty_service import (
    get_department_faculty,
    get_faculty_with_assignments,
    add_faculty,
    update_faculty,
    delete_faculty,
)
from dept_admin.services.subject_service import (
    AVAILABLE_YEARS,
    AVAILABLE_SEMESTERS,
    get_department_subjects,
    get_subjects_with_assignments,
    add_subject,
    update_subject,
    delete_subject,
)
from dept_admin.services.assignment_service import (
    assign_faculty_to_subject,
    remove_faculty_assignment,
    get_available_faculty_for_subject,
)

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)


def _payload():
    """JSON object for AJAX calls, form data otherwise."""
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValueError("Invalid request")
        return data
    return request.form


def _system_error(action):
    db.session.rollback()
    logger.exception(f"Database error while {action}")
    return jsonify({"success": False, "message": f"Error {action}. Please try again."}), 500


# =========================================================
# DASHBOARDS
# =========================================================

@admin_bp.route("/")
@login_required
def main_dashboard():
    return render_template(
        "admin/main_dashboard.html",
        stats=get_system_stats(),
        admin_email=session.get("admin_email"),
        admin_department=session.get("admin_department")
    )


@admin_bp.route("/department")
@department_required()
def department_dashboard():
    return render_template(
        "admin/department_dashboard.html",
        department=managed_department(),
        admin_email=session.get("admin_email"),
        admin_department=session.get("admin_department"),
        stats=get_department_stats(),
        recent_students=get_recent_students(),
        recent_enrollments=get_recent_enrollments(),
        faculty=get_department_faculty(),
        subjects=get_department_subjects(),
        mappings=get_subjects_with_assignments()
    )


@admin_bp.route("/department/system-info")
@department_required(json=True)
def system_info():
    return jsonify(get_department_system_info())


# =========================================================
# PROFILE
# =========================================================

@admin_bp.route("/profile", methods=["GET", "POST"])
@login_required
def profile():
    admin_id = session["admin_id"]
    error = None

    if request.method == "POST":
        try:
            admin = update_admin_profile(
                admin_id,
                request.form.get("email"),
                request.form.get("department")
            )
            session["admin_email"] = admin.email
            session["admin_department"] = admin.department
            flash("Profile updated successfully!", "success")
            return redirect(url_for("admin.profile"))
        except ValueError as e:
            db.session.rollback()
            error = str(e)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Database error while updating admin profile")
            error = "Error updating profile."

    return render_template("admin/profile.html", admin=get_admin(admin_id), error=error)


@admin_bp.route("/profile/password", methods=["POST"])
def change_password():
    # JSON-only endpoint: answer instead of redirecting
    admin_id = session.get("admin_id")
    if admin_id is None:
        return jsonify({"success": False, "message": "Please login to continue."}), 401

    try:
        data = _payload()
        change_admin_password(
            admin_id,
            data.get("current_password"),
            data.get("new_password"),
            data.get("confirm_password")
        )
        return jsonify({"success": True, "message": "Password changed successfully!"})
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("changing password")


# =========================================================
# STUDENTS
# =========================================================

@admin_bp.route("/students")
@department_required()
def manage_students():
    return render_template(
        "admin/students.html",
        department=managed_department(),
        students=get_department_students(),
        subjects=get_department_subjects()
    )


@admin_bp.route("/students/filter", methods=["POST"])
@department_required(json=True)
def filter_students_json():
    try:
        students = filter_students_by(_payload())
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    return jsonify({"success": True, "data": students})


@admin_bp.route("/students/add", methods=["GET", "POST"])
@department_required()
def add_student_view():
    error = None
    form = {}

    if request.method == "POST":
        form = request.form
        try:
            add_student(
                full_name=form.get("full_name"),
                regd_number=form.get("regd_number"),
                email=form.get("email"),
                year=form.get("year"),
                password=form.get("password")
            )
            flash("Student added successfully!", "success")
            return redirect(url_for("admin.manage_students"))
        except ValueError as e:
            db.session.rollback()
            error = str(e)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Database error while adding student")
            error = "Error adding student."

    return render_template(
        "admin/student_form.html",
        is_edit=False,
        form=form,
        error=error
    ), (400 if error else 200)


@admin_bp.route("/students/<student_id>/edit", methods=["GET", "POST"])
@department_required()
def edit_student_view(student_id):
    student = get_department_student(student_id)
    error = None
    form = {
        "full_name": student.full_name,
        "regd_number": student.regd_number,
        "email": student.email,
        "year": student.year,
    }

    if request.method == "POST":
        form = request.form
        try:
            update_student(
                student_id,
                full_name=form.get("full_name"),
                regd_number=form.get("regd_number"),
                email=form.get("email"),
                year=form.get("year"),
                password=form.get("password")
            )
            flash("Student updated successfully!", "success")
            return redirect(url_for("admin.manage_students"))
        except ValueError as e:
            db.session.rollback()
            error = str(e)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Database error while updating student {student_id}")
            error = "Error updating student."

    return render_template(
        "admin/student_form.html",
        is_edit=True,
        student_id=student_id,
        form=form,
        error=error
    ), (400 if error else 200)


@admin_bp.route("/students/<student_id>/delete", methods=["POST"])
@department_required(json=True)
def remove_student(student_id):
    try:
        delete_student(student_id)
        return jsonify({"success": True, "message": "Student deleted successfully"})
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 404
    except SQLAlchemyError:
        return _system_error("deleting student")


# =========================================================
# FACULTY
# =========================================================

@admin_bp.route("/faculty")
@department_required()
def manage_faculty():
    return render_template(
        "admin/faculty.html",
        faculty=get_faculty_with_assignments(),
        subjects=get_department_subjects()
    )


@admin_bp.route("/faculty/data")
@department_required(json=True)
def department_faculty_json():
    return jsonify({"success": True, "data": get_faculty_with_assignments()})


@admin_bp.route("/faculty/add", methods=["POST"])
@department_required(json=True)
def add_faculty_json():
    try:
        data = _payload()
        subject_ids = data.get("subject_ids") if request.is_json else request.form.getlist("subject_ids")
        faculty = add_faculty(
            data.get("name"),
            data.get("email"),
            data.get("password"),
            subject_ids
        )
        return jsonify({"success": True, "message": "Faculty added successfully", "id": faculty.id})
    except ValueError as e:
        db.session.rollback()
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("adding faculty")


@admin_bp.route("/faculty/update", methods=["POST"])
@department_required(json=True)
def update_faculty_json():
    try:
        data = _payload()
        update_faculty(
            parse_id(data.get("faculty_id"), "faculty"),
            data.get("name"),
            data.get("email"),
            data.get("password")
        )
        return jsonify({"success": True, "message": "Faculty updated successfully"})
    except ValueError as e:
        db.session.rollback()
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("updating faculty")


@admin_bp.route("/faculty/delete", methods=["POST"])
@department_required(json=True)
def remove_faculty():
    try:
        data = _payload()
        delete_faculty(parse_id(data.get("faculty_id"), "faculty"))
        return jsonify({"success": True, "message": "Faculty deleted successfully"})
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("deleting faculty")


# =========================================================
# SUBJECTS
# =========================================================

@admin_bp.route("/subjects")
@department_required()
def manage_subjects():
    return render_template(
        "admin/subjects.html",
        subjects=get_subjects_with_assignments(),
        years=AVAILABLE_YEARS,
        semesters=AVAILABLE_SEMESTERS
    )


@admin_bp.route("/subjects/data")
@department_required(json=True)
def department_subjects_json():
    return jsonify({"success": True, "data": get_subjects_with_assignments()})


@admin_bp.route("/subjects/add", methods=["POST"])
@department_required(json=True)
def add_subject_json():
    try:
        data = _payload()
        subject = add_subject(
            data.get("name"),
            data.get("year"),
            data.get("semester"),
            data.get("semester_start_date"),
            data.get("semester_end_date")
        )
        return jsonify({"success": True, "message": "Subject added successfully", "id": subject.id})
    except ValueError as e:
        db.session.rollback()
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("adding subject")


@admin_bp.route("/subjects/update", methods=["POST"])
@department_required(json=True)
def update_subject_json():
    try:
        data = _payload()
        update_subject(
            parse_id(data.get("subject_id"), "subject"),
            data.get("name"),
            data.get("year"),
            data.get("semester"),
            data.get("semester_start_date"),
            data.get("semester_end_date")
        )
        return jsonify({"success": True, "message": "Subject updated successfully"})
    except ValueError as e:
        db.session.rollback()
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("updating subject")


@admin_bp.route("/subjects/delete", methods=["POST"])
@department_required(json=True)
def remove_subject():
    try:
        data = _payload()
        delete_subject(parse_id(data.get("subject_id"), "subject"))
        return jsonify({"success": True, "message": "Subject deleted successfully"})
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("deleting subject")


# =========================================================
# SUBJECT-FACULTY ASSIGNMENTS
# =========================================================

@admin_bp.route("/assignments")
@department_required()
def manage_assignments():
    return render_template(
        "admin/assignments.html",
        subjects=get_subjects_with_assignments(),
        faculty=get_department_faculty()
    )


@admin_bp.route("/assignments/assign", methods=["POST"])
@department_required(json=True)
def assign_faculty():
    try:
        data = _payload()
        faculty_ids = data.get("faculty_ids") if request.is_json else request.form.getlist("faculty_ids")
        assign_faculty_to_subject(parse_id(data.get("subject_id"), "subject"), faculty_ids)
        return jsonify({"success": True, "message": "Faculty assignments updated successfully"})
    except ValueError as e:
        db.session.rollback()
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("updating assignments")


@admin_bp.route("/assignments/remove", methods=["POST"])
@department_required(json=True)
def remove_assignment():
    try:
        data = _payload()
        remove_faculty_assignment(parse_id(data.get("assigned_subject_id"), "assignment"))
        return jsonify({"success": True, "message": "Faculty assignment removed successfully"})
    except LookupError as e:
        return jsonify({"success": False, "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        return _system_error("removing assignment")


@admin_bp.route("/assignments/available-faculty/<int:subject_id>")
@department_required(json=True)
def available_faculty(subject_id):
    try:
        faculty = get_available_faculty_for_subject(subject_id)
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 404
    return jsonify({"success": True, "data": faculty})
