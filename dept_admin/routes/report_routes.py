# dept_admin/routes/report_routes.py
import json
import logging

from flask import Blueprint, jsonify, render_template, request, send_file
from sqlalchemy.exc import SQLAlchemyError

from dept_admin.extensions import db
from dept_admin.utils.decorators import department_required
from dept_admin.utils.department import managed_department
from dept_admin.services.subject_service import (
    AVAILABLE_YEARS,
    AVAILABLE_SEMESTERS,
    get_department_subjects,
)
from dept_admin.services.faculty_service import get_department_faculty
from dept_admin.services.assignment_service import get_faculty_by_subject
from dept_admin.services.student_service import filter_students_by
from dept_admin.services.report_service import (
    ReportFilters,
    generate_enrollment_report,
    get_empty_report_debug,
    get_database_overview,
)
from dept_admin.services.export_service import (
    XLSX_MIMETYPE,
    PDF_MIMETYPE,
    export_report_excel,
    export_report_pdf,
    export_students_excel,
    export_students_pdf,
)

logger = logging.getLogger(__name__)

reports_bp = Blueprint("reports", __name__)


def _request_filters():
    """
    Filters arrive as a JSON body from AJAX calls, or as a JSON string in the
    "filters" field when the page posts a download form.
    """
    data = request.get_json(silent=True)
    if data is None:
        raw = request.form.get("filters")
        if raw:
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                raise ValueError("Invalid filters")
        else:
            data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValueError("Invalid filters")
    return data


def _send(stream, filename, mimetype):
    return send_file(stream, as_attachment=True, download_name=filename, mimetype=mimetype)


@reports_bp.route("/")
@department_required()
def reports_page():
    return render_template(
        "admin/reports.html",
        department=managed_department(),
        subjects=get_department_subjects(order_by_name=True),
        faculty=get_department_faculty(),
        years=AVAILABLE_YEARS,
        semesters=AVAILABLE_SEMESTERS
    )


@reports_bp.route("/faculty-by-subject/<int:subject_id>")
@department_required(json=True)
def faculty_by_subject(subject_id):
    return jsonify({"success": True, "data": get_faculty_by_subject(subject_id)})


# =========================================================
# ENROLLMENT REPORT
# =========================================================

@reports_bp.route("/generate", methods=["POST"])
@department_required(json=True)
def generate_report():
    try:
        filters = ReportFilters.from_dict(_request_filters())
        rows = generate_enrollment_report(filters)
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Database error while generating enrollment report")
        return jsonify({"success": False, "message": "Error generating report"}), 500

    if not rows:
        return jsonify({
            "success": True,
            "data": [],
            "message": "No enrollments found for the selected criteria",
            "debug": get_empty_report_debug(filters)
        })

    return jsonify({
        "success": True,
        "data": rows,
        "message": f"Found {len(rows)} enrollment(s)"
    })


@reports_bp.route("/export/excel", methods=["POST"])
@department_required(json=True)
def export_excel():
    try:
        rows = generate_enrollment_report(ReportFilters.from_dict(_request_filters()))
        stream, filename = export_report_excel(rows, managed_department())
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    return _send(stream, filename, XLSX_MIMETYPE)


@reports_bp.route("/export/pdf", methods=["POST"])
@department_required(json=True)
def export_pdf():
    try:
        rows = generate_enrollment_report(ReportFilters.from_dict(_request_filters()))
        stream, filename = export_report_pdf(rows, managed_department())
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    return _send(stream, filename, PDF_MIMETYPE)


# =========================================================
# STUDENT EXPORTS
# =========================================================

@reports_bp.route("/students/export/excel", methods=["POST"])
@department_required(json=True)
def export_students_excel_view():
    try:
        students = filter_students_by(_request_filters())
        stream, filename = export_students_excel(students, managed_department())
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    return _send(stream, filename, XLSX_MIMETYPE)


@reports_bp.route("/students/export/pdf", methods=["POST"])
@department_required(json=True)
def export_students_pdf_view():
    try:
        students = filter_students_by(_request_filters())
        stream, filename = export_students_pdf(students, managed_department())
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    return _send(stream, filename, PDF_MIMETYPE)


@reports_bp.route("/debug")
@department_required(json=True)
def debug_data():
    return jsonify({"success": True, "data": get_database_overview()})
