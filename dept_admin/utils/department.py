# dept_admin/utils/department.py
from flask import current_app


def normalize_department(value) -> str:
    """
    Collapses spelling variants of a department name:
    "CSE(DS)", "cse-ds" and "CSE DS" all become "CSEDS".
    """
    if not value:
        return ""
    return (
        str(value)
        .upper()
        .replace("(", "")
        .replace(")", "")
        .replace(" ", "")
        .replace("-", "")
        .strip()
    )


def managed_department() -> str:
    return normalize_department(current_app.config["MANAGED_DEPARTMENT"])


def department_spellings(department=None) -> list:
    """
    Stored spellings accepted for a department code.
    Falls back to the code itself when no aliases are configured.
    """
    code = normalize_department(department) if department else managed_department()
    spellings = current_app.config.get("DEPARTMENT_SPELLINGS", {}).get(code)
    if not spellings:
        return [code]
    return list(spellings)


def is_managed_department(value) -> bool:
    code = normalize_department(value)
    return bool(code) and code == managed_department()


def in_department(column, department=None):
    """SQL filter clause: column holds one of the accepted spellings."""
    return column.in_(department_spellings(department))
