import pytest

from dept_admin.extensions import db
from dept_admin.models.faculty import Faculty
from dept_admin.models.assigned_subject import AssignedSubject
from dept_admin.services.faculty_service import (
    get_faculty_with_assignments,
    add_faculty,
    update_faculty,
    delete_faculty,
    faculty_has_enrollments,
)


def test_faculty_with_assignments(seed):
    faculty = get_faculty_with_assignments()

    assert [f["name"] for f in faculty] == ["Alice Rao", "Bala Krishna"]
    alice, bala = faculty
    assert alice["total_enrollments"] == 2
    assert [s["subject_name"] for s in alice["assigned_subjects"]] == ["Data Mining"]
    assert bala["total_enrollments"] == 1
    assert {s["subject_name"] for s in bala["assigned_subjects"]} == {"Data Mining", "Machine Learning"}


def test_add_faculty_with_subjects(seed):
    faculty = add_faculty("Deepa M", "deepa@test.edu", "secret1", [seed["statistics"], seed["data_mining"]])

    assert faculty.department == "CSEDS"
    assert faculty.check_password("secret1")
    offerings = AssignedSubject.query.filter_by(faculty_id=faculty.id).all()
    assert {a.subject_id for a in offerings} == {seed["statistics"], seed["data_mining"]}
    # year is copied from the subject
    assert {a.year for a in offerings} == {2, 3}


def test_add_faculty_rejects_foreign_subject(seed):
    with pytest.raises(ValueError, match="do not belong to the department"):
        add_faculty("Deepa M", "deepa@test.edu", "secret1", [seed["circuits"]])

    assert Faculty.query.filter_by(email="deepa@test.edu").first() is None


def test_add_faculty_validation(seed):
    with pytest.raises(ValueError, match="required"):
        add_faculty("", "deepa@test.edu", "secret1")

    with pytest.raises(ValueError, match="Password is required"):
        add_faculty("Deepa", "deepa@test.edu", "")

    with pytest.raises(ValueError, match="already exists"):
        add_faculty("Alice Again", "alice@test.edu", "secret1")


def test_update_faculty(seed):
    faculty = update_faculty(seed["alice"], "Alice R", "alice.r@test.edu")
    assert faculty.name == "Alice R"
    assert faculty.check_password("faculty123")

    with pytest.raises(ValueError, match="already exists"):
        update_faculty(seed["alice"], "Alice R", "bala@test.edu")


def test_update_faculty_of_other_department(seed):
    with pytest.raises(ValueError, match="Faculty not found"):
        update_faculty(seed["chitra"], "Chitra", "chitra@test.edu")


def test_delete_faculty_with_enrollments_is_blocked(seed):
    assert faculty_has_enrollments(seed["alice"])

    with pytest.raises(ValueError, match="active student enrollments"):
        delete_faculty(seed["alice"])

    assert db.session.get(Faculty, seed["alice"]) is not None


def test_delete_faculty_without_enrollments(seed):
    faculty = add_faculty("Deepa M", "deepa@test.edu", "secret1", [seed["statistics"]])
    faculty_id = faculty.id

    delete_faculty(faculty_id)

    assert db.session.get(Faculty, faculty_id) is None
    assert AssignedSubject.query.filter_by(faculty_id=faculty_id).count() == 0


def test_faculty_page(admin_client):
    resp = admin_client.get("/admin/faculty")
    assert resp.status_code == 200
    assert b"Alice Rao" in resp.data
    assert b"Chitra Devi" not in resp.data


def test_faculty_data_endpoint(admin_client):
    data = admin_client.get("/admin/faculty/data").get_json()
    assert data["success"] is True
    assert len(data["data"]) == 2


def test_add_faculty_endpoint(admin_client, seed):
    resp = admin_client.post("/admin/faculty/add", json={
        "name": "Deepa M",
        "email": "deepa@test.edu",
        "password": "secret1",
        "subject_ids": [seed["statistics"]],
    })
    data = resp.get_json()
    assert data["success"] is True
    assert db.session.get(Faculty, data["id"]).name == "Deepa M"


def test_add_faculty_endpoint_duplicate(admin_client):
    resp = admin_client.post("/admin/faculty/add", json={
        "name": "Alice", "email": "alice@test.edu", "password": "secret1",
    })
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Faculty with this email already exists"


def test_update_faculty_endpoint(admin_client, seed):
    resp = admin_client.post("/admin/faculty/update", json={
        "faculty_id": seed["bala"], "name": "Bala K", "email": "bala@test.edu",
    })
    assert resp.get_json()["success"] is True
    assert db.session.get(Faculty, seed["bala"]).name == "Bala K"


def test_delete_faculty_endpoint_blocked(admin_client, seed):
    resp = admin_client.post("/admin/faculty/delete", json={"faculty_id": seed["bala"]})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Cannot delete faculty with active student enrollments"


def test_add_faculty_rejects_scalar_subject_ids(seed):
    with pytest.raises(ValueError, match="Subject ids must be a list"):
        add_faculty("Deepa M", "deepa@test.edu", "secret1", seed["statistics"])


def test_delete_faculty_endpoint_rejects_non_object_body(admin_client, seed):
    resp = admin_client.post("/admin/faculty/delete", json=[seed["alice"]])

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Invalid request"}
    assert db.session.get(Faculty, seed["alice"]) is not None


def test_faculty_endpoints_reject_bad_ids(admin_client):
    resp = admin_client.post("/admin/faculty/delete", json={"faculty_id": "abc"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid faculty id"

    resp = admin_client.post("/admin/faculty/update", json={"name": "X", "email": "x@test.edu"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid faculty id"


def test_add_faculty_endpoint_scalar_subject_ids(admin_client, seed):
    resp = admin_client.post("/admin/faculty/add", json={
        "name": "Deepa M",
        "email": "deepa@test.edu",
        "password": "secret1",
        "subject_ids": seed["statistics"],
    })

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Subject ids must be a list"
    assert Faculty.query.filter_by(email="deepa@test.edu").first() is None
