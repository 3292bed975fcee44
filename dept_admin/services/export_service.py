# dept_admin/services/export_service.py
import logging
from io import BytesIO
from xml.sax.saxutils import escape

import pandas as pd
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from dept_admin.utils.timezone import get_local_time

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIMETYPE = "application/pdf"

REPORT_HEADERS = [
    "Student Name", "Registration No", "Email", "Year",
    "Subject", "Faculty", "Faculty Email", "Semester",
]
STUDENT_HEADERS = [
    "Student ID", "Full Name", "Registration Number", "Email",
    "Year", "Department", "Total Enrollments", "Enrolled Subjects",
]

# relative PDF column widths
REPORT_PDF_WIDTHS = [2, 1.5, 2.5, 1, 2, 2, 2.5, 1]
STUDENT_PDF_WIDTHS = [1.5, 2.5, 1.5, 2.5, 1, 1.2, 1.2, 3]

PDF_SUBJECT_LIMIT = 3


# =========================================================
# ROW MAPPING
# =========================================================

def report_records(rows):
    return [
        [
            r["student_name"],
            r["student_regd_number"],
            r["student_email"],
            r["student_year"],
            r["subject_name"],
            r["faculty_name"],
            r["faculty_email"],
            r["semester"],
        ]
        for r in rows
    ]


def format_enrolled_subjects(subjects, limit=None):
    labels = [f"{s['subject_name']} (Sem {s['semester']})" for s in subjects]
    if limit is None or len(labels) <= limit:
        return ", ".join(labels)
    return ", ".join(labels[:limit]) + f" +{len(labels) - limit} more"


def student_records(students, subject_limit=None):
    return [
        [
            s["student_id"],
            s["full_name"],
            s["regd_number"],
            s["email"],
            s["year"],
            s["department"],
            s["total_enrollments"],
            format_enrolled_subjects(s["enrolled_subjects"], subject_limit),
        ]
        for s in students
    ]


# =========================================================
# XLSX
# =========================================================

def build_xlsx(headers, records, sheet_name) -> BytesIO:
    df = pd.DataFrame(records, columns=headers)
    sheet_name = sheet_name[:31]  # Excel sheet name limit

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]

        header_font = Font(bold=True)
        header_fill = PatternFill(start_color="ADD8E6", end_color="ADD8E6", fill_type="solid")
        for col_num in range(1, len(headers) + 1):
            cell = ws.cell(row=1, column=col_num)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center", vertical="center")

        for col_num, header in enumerate(headers, 1):
            values = [str(header)] + ["" if v is None else str(v) for v in df.iloc[:, col_num - 1]]
            width = max(len(v) for v in values)
            ws.column_dimensions[get_column_letter(col_num)].width = min(width + 2, 50)

        ws.freeze_panes = "A2"

    buffer.seek(0)
    return buffer


# =========================================================
# PDF
# =========================================================

def build_pdf(headers, records, title, summary, relative_widths) -> BytesIO:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        rightMargin=25, leftMargin=25,
        topMargin=30, bottomMargin=30,
        title=title
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle", parent=styles["Heading1"],
        fontName="Helvetica-Bold", fontSize=16, alignment=TA_CENTER, spaceAfter=20
    )
    date_style = ParagraphStyle(
        "ReportDate", parent=styles["Normal"],
        fontName="Helvetica", fontSize=10, alignment=TA_RIGHT, spaceAfter=20
    )
    header_style = ParagraphStyle(
        "ReportHeader", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=10
    )
    cell_style = ParagraphStyle(
        "ReportCell", parent=styles["Normal"], fontName="Helvetica", fontSize=8
    )
    summary_style = ParagraphStyle(
        "ReportSummary", parent=styles["Normal"],
        fontName="Helvetica-Bold", fontSize=12, alignment=TA_CENTER, spaceBefore=20
    )

    generated = get_local_time().strftime("%Y-%m-%d %H:%M:%S")
    elements = [
        Paragraph(escape(title), title_style),
        Paragraph(f"Generated on: {generated}", date_style),
    ]

    table_data = [[Paragraph(escape(h), header_style) for h in headers]]
    for record in records:
        table_data.append([
            Paragraph(escape("" if v is None else str(v)), cell_style) for v in record
        ])

    total_width = landscape(A4)[0] - 50
    scale = total_width / sum(relative_widths)
    table = Table(table_data, colWidths=[w * scale for w in relative_widths], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, 0), 5),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 5),
        ("TOPPADDING", (0, 1), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 1), (-1, -1), 3),
    ]))
    elements.append(table)

    elements.append(Spacer(1, 12))
    elements.append(Paragraph(escape(summary), summary_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer


# =========================================================
# EXPORTS
# =========================================================

def _filename(prefix, extension):
    return f"{prefix}_{get_local_time().strftime('%Y%m%d_%H%M%S')}.{extension}"


def export_report_excel(rows, department):
    if not rows:
        raise ValueError("No data found for the selected criteria")

    stream = build_xlsx(REPORT_HEADERS, report_records(rows), f"{department} Enrollment Report")
    logger.info(f"Exported {len(rows)} report row(s) to xlsx")
    return stream, _filename(f"{department}_Enrollment_Report", "xlsx")


def export_report_pdf(rows, department):
    if not rows:
        raise ValueError("No data found for the selected criteria")

    stream = build_pdf(
        REPORT_HEADERS,
        report_records(rows),
        f"{department} Department - Enrollment Report",
        f"Total Records: {len(rows)}",
        REPORT_PDF_WIDTHS
    )
    logger.info(f"Exported {len(rows)} report row(s) to pdf")
    return stream, _filename(f"{department}_Enrollment_Report", "pdf")


def export_students_excel(students, department):
    if not students:
        raise ValueError("No student data to export")

    stream = build_xlsx(STUDENT_HEADERS, student_records(students), f"{department} Students")
    logger.info(f"Exported {len(students)} student(s) to xlsx")
    return stream, _filename(f"{department}_Students", "xlsx")


def export_students_pdf(students, department):
    if not students:
        raise ValueError("No student data to export")

    stream = build_pdf(
        STUDENT_HEADERS,
        student_records(students, subject_limit=PDF_SUBJECT_LIMIT),
        f"{department} Department - Students Report",
        f"Total Students: {len(students)}",
        STUDENT_PDF_WIDTHS
    )
    logger.info(f"Exported {len(students)} student(s) to pdf")
    return stream, _filename(f"{department}_Students", "pdf")
