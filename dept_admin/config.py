import os


def _spellings_from_env(raw):
    """
    Parses "CSEDS=CSEDS|CSE(DS);ECE=ECE" into
    {"CSEDS": ["CSEDS", "CSE(DS)"], "ECE": ["ECE"]}.
    """
    mapping = {}
    for chunk in raw.split(";"):
        if "=" not in chunk:
            continue
        code, spellings = chunk.split("=", 1)
        mapping[code.strip().upper()] = [s.strip() for s in spellings.split("|") if s.strip()]
    return mapping


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dept_admin.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Department managed through the console and the spellings stored for it
    MANAGED_DEPARTMENT = os.getenv("MANAGED_DEPARTMENT", "CSEDS")
    DEPARTMENT_SPELLINGS = _spellings_from_env(
        os.getenv("DEPARTMENT_SPELLINGS", "CSEDS=CSEDS|CSE(DS)")
    )

    DEFAULT_STUDENT_PASSWORD = os.getenv("DEFAULT_STUDENT_PASSWORD", "TutorLive123")

    SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "cseds@rgmcet.edu.in")
    SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")
    SEED_ADMIN_DEPARTMENT = os.getenv("SEED_ADMIN_DEPARTMENT", "CSEDS")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"
