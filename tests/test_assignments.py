import pytest

from dept_admin.extensions import db
from dept_admin.models.assigned_subject import AssignedSubject
from dept_admin.models.enrollment import StudentEnrollment
from dept_admin.services.assignment_service import (
    assign_faculty_to_subject,
    remove_faculty_assignment,
    get_available_faculty_for_subject,
    get_faculty_by_subject,
    can_remove_assignment,
)


def _faculty_ids(subject_id):
    return {a.faculty_id for a in AssignedSubject.query.filter_by(subject_id=subject_id).all()}


def test_assign_keeps_existing_offerings(seed):
    assign_faculty_to_subject(seed["machine_learning"], [seed["bala"], seed["alice"]])

    assert _faculty_ids(seed["machine_learning"]) == {seed["alice"], seed["bala"]}
    # Bala's offering survives with its enrollment
    assert db.session.get(AssignedSubject, seed["bala_ml"]) is not None
    assert StudentEnrollment.query.filter_by(assigned_subject_id=seed["bala_ml"]).count() == 1

    new_offering = AssignedSubject.query.filter_by(
        subject_id=seed["machine_learning"], faculty_id=seed["alice"]
    ).one()
    assert new_offering.year == 3
    assert new_offering.department == "CSEDS"
    assert new_offering.selected_count == 0


def test_assign_removes_unenrolled_offerings(seed):
    assign_faculty_to_subject(seed["data_mining"], [seed["alice"]])

    assert _faculty_ids(seed["data_mining"]) == {seed["alice"]}
    assert db.session.get(AssignedSubject, seed["bala_dm"]) is None


def test_assign_refuses_to_drop_enrolled_offering(seed):
    with pytest.raises(ValueError, match=r"active student enrollments \(Alice Rao\)"):
        assign_faculty_to_subject(seed["data_mining"], [seed["bala"]])

    db.session.rollback()
    assert _faculty_ids(seed["data_mining"]) == {seed["alice"], seed["bala"]}


def test_assign_rejects_other_department_faculty(seed):
    with pytest.raises(ValueError, match="do not belong to the department"):
        assign_faculty_to_subject(seed["statistics"], [seed["chitra"]])


def test_assign_rejects_other_department_subject(seed):
    with pytest.raises(ValueError, match="Subject not found"):
        assign_faculty_to_subject(seed["circuits"], [seed["alice"]])


def test_remove_assignment(seed):
    assert can_remove_assignment(seed["bala_dm"])

    remove_faculty_assignment(seed["bala_dm"])

    assert db.session.get(AssignedSubject, seed["bala_dm"]) is None


def test_remove_assignment_with_enrollments_is_blocked(seed):
    assert not can_remove_assignment(seed["alice_dm"])

    with pytest.raises(ValueError, match="Cannot remove assignment with active student enrollments"):
        remove_faculty_assignment(seed["alice_dm"])


def test_remove_assignment_of_other_department(seed):
    with pytest.raises(LookupError):
        remove_faculty_assignment(seed["chitra_circuits"])


def test_available_faculty_flags(seed):
    faculty = get_available_faculty_for_subject(seed["machine_learning"])

    assert [(f["name"], f["is_assigned"]) for f in faculty] == [
        ("Alice Rao", False),
        ("Bala Krishna", True),
    ]


def test_faculty_by_subject(seed):
    assert [f["name"] for f in get_faculty_by_subject(seed["data_mining"])] == ["Alice Rao", "Bala Krishna"]
    assert get_faculty_by_subject(seed["circuits"]) == []


def test_assignments_page(admin_client):
    resp = admin_client.get("/admin/assignments")
    assert resp.status_code == 200
    assert b"Unassigned" in resp.data


def test_assign_endpoint(admin_client, seed):
    resp = admin_client.post("/admin/assignments/assign", json={
        "subject_id": seed["statistics"],
        "faculty_ids": [seed["alice"], seed["bala"]],
    })
    assert resp.get_json()["success"] is True
    assert _faculty_ids(seed["statistics"]) == {seed["alice"], seed["bala"]}


def test_assign_endpoint_blocked(admin_client, seed):
    resp = admin_client.post("/admin/assignments/assign", json={
        "subject_id": seed["data_mining"],
        "faculty_ids": [],
    })
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert _faculty_ids(seed["data_mining"]) == {seed["alice"], seed["bala"]}


def test_remove_endpoint(admin_client, seed):
    resp = admin_client.post("/admin/assignments/remove", json={"assigned_subject_id": seed["alice_dm"]})
    assert resp.status_code == 400

    resp = admin_client.post("/admin/assignments/remove", json={"assigned_subject_id": 9999})
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Assignment not found"

    resp = admin_client.post("/admin/assignments/remove", json={"assigned_subject_id": seed["bala_dm"]})
    assert resp.get_json()["success"] is True


def test_available_faculty_endpoint(admin_client, seed):
    data = admin_client.get(f"/admin/assignments/available-faculty/{seed['data_mining']}").get_json()
    assert all(f["is_assigned"] for f in data["data"])


def test_assign_rejects_scalar_faculty_ids(seed):
    with pytest.raises(ValueError, match="Faculty ids must be a list"):
        assign_faculty_to_subject(seed["statistics"], seed["alice"])


def test_assign_endpoint_scalar_faculty_ids(admin_client, seed):
    resp = admin_client.post("/admin/assignments/assign", json={
        "subject_id": seed["statistics"],
        "faculty_ids": seed["alice"],
    })

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Faculty ids must be a list"}
    assert _faculty_ids(seed["statistics"]) == set()


def test_assignment_endpoints_reject_bad_ids(admin_client):
    resp = admin_client.post("/admin/assignments/assign", json={"subject_id": "abc", "faculty_ids": []})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid subject id"

    resp = admin_client.post("/admin/assignments/remove", json={"assigned_subject_id": "abc"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid assignment id"

    resp = admin_client.post("/admin/assignments/remove", json="abc")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid request"


def test_available_faculty_for_unknown_subject(seed):
    with pytest.raises(ValueError, match="Subject not found"):
        get_available_faculty_for_subject(seed["circuits"])


def test_available_faculty_endpoint_unknown_subject(admin_client, seed):
    resp = admin_client.get("/admin/assignments/available-faculty/9999")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False

    resp = admin_client.get(f"/admin/assignments/available-faculty/{seed['circuits']}")
    assert resp.status_code == 404
