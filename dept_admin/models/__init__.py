from .admin import Admin
from .faculty import Faculty
from .subject import Subject
from .assigned_subject import AssignedSubject
from .student import Student
from .enrollment import StudentEnrollment
