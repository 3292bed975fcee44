from datetime import datetime, date

import pytest

from dept_admin import create_app
from dept_admin.config import TestConfig
from dept_admin.extensions import db
from dept_admin.models.admin import Admin
from dept_admin.models.faculty import Faculty
from dept_admin.models.subject import Subject
from dept_admin.models.assigned_subject import AssignedSubject
from dept_admin.models.student import Student
from dept_admin.models.enrollment import StudentEnrollment

ADMIN_EMAIL = "cseds@test.edu"
ADMIN_PASSWORD = "admin123"
OTHER_ADMIN_EMAIL = "ece@test.edu"


def _admin(email, department):
    admin = Admin(email=email, department=department)
    admin.set_password(ADMIN_PASSWORD)
    db.session.add(admin)
    return admin


def _faculty(name, email, department):
    faculty = Faculty(name=name, email=email, department=department)
    faculty.set_password("faculty123")
    db.session.add(faculty)
    return faculty


def _student(regd_number, full_name, year, department):
    student = Student(
        id=regd_number,
        regd_number=regd_number,
        full_name=full_name,
        email=f"{regd_number.lower()}@test.edu",
        year=year,
        department=department
    )
    student.set_password("TutorLive123")
    db.session.add(student)
    return student


def _offering(faculty, subject):
    assignment = AssignedSubject(
        faculty_id=faculty.id,
        subject_id=subject.id,
        department=subject.department,
        year=subject.year,
        selected_count=0
    )
    db.session.add(assignment)
    return assignment


def _seed():
    """
    Department data stored under both spellings of CSEDS, plus an ECE
    department that must never leak into the console.
    """
    _admin(ADMIN_EMAIL, "CSEDS")
    _admin(OTHER_ADMIN_EMAIL, "ECE")

    data_mining = Subject(name="Data Mining", department="CSEDS", year=3, semester="Fall",
                          semester_start_date=date(2024, 1, 1), semester_end_date=date(2099, 5, 31))
    machine_learning = Subject(name="Machine Learning", department="CSE(DS)", year=3, semester="Spring")
    circuits = Subject(name="Circuits", department="ECE", year=2, semester="Fall")
    statistics = Subject(name="Statistics", department="CSEDS", year=2, semester="Fall",
                         semester_end_date=date(2020, 5, 31))
    db.session.add_all([data_mining, machine_learning, circuits, statistics])

    alice = _faculty("Alice Rao", "alice@test.edu", "CSEDS")
    bala = _faculty("Bala Krishna", "bala@test.edu", "CSE(DS)")
    chitra = _faculty("Chitra Devi", "chitra@test.edu", "ECE")
    db.session.flush()

    alice_dm = _offering(alice, data_mining)
    bala_ml = _offering(bala, machine_learning)
    bala_dm = _offering(bala, data_mining)
    chitra_circuits = _offering(chitra, circuits)

    arun = _student("21CSD001", "Arun Kumar", "3", "CSEDS")
    bhavya = _student("21CSD002", "Bhavya Sri", "3", "CSE(DS)")
    charan = _student("21CSD003", "Charan Teja", "2", "CSEDS")
    esha = _student("21ECE001", "Esha Nair", "2", "ECE")
    db.session.flush()

    db.session.add_all([
        StudentEnrollment(student_id=arun.id, assigned_subject_id=alice_dm.id,
                          enrolled_at=datetime(2024, 1, 10, 9, 30)),
        StudentEnrollment(student_id=arun.id, assigned_subject_id=bala_ml.id,
                          enrolled_at=datetime(2024, 2, 15, 18, 45)),
        StudentEnrollment(student_id=bhavya.id, assigned_subject_id=alice_dm.id,
                          enrolled_at=datetime(2024, 3, 1, 11, 0)),
        StudentEnrollment(student_id=esha.id, assigned_subject_id=chitra_circuits.id,
                          enrolled_at=datetime(2024, 1, 20, 10, 0)),
    ])
    db.session.commit()

    return {
        "data_mining": data_mining.id,
        "machine_learning": machine_learning.id,
        "circuits": circuits.id,
        "statistics": statistics.id,
        "alice": alice.id,
        "bala": bala.id,
        "chitra": chitra.id,
        "alice_dm": alice_dm.id,
        "bala_ml": bala_ml.id,
        "bala_dm": bala_dm.id,
        "chitra_circuits": chitra_circuits.id,
        "arun": arun.id,
        "bhavya": bhavya.id,
        "charan": charan.id,
        "esha": esha.id,
    }


@pytest.fixture
def app():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    db.create_all()

    yield app

    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def seed(app):
    return _seed()


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    return client.post("/login", data={"email": email, "password": password})


@pytest.fixture
def admin_client(client, seed):
    login(client)
    return client
