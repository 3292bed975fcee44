from datetime import datetime

import pytz
from flask import current_app, has_app_context


def get_local_time():
    """Current time in the configured campus timezone (IST by default)."""
    tz_name = "Asia/Kolkata"
    if has_app_context():
        tz_name = current_app.config.get("TIMEZONE", tz_name)
    return datetime.now(pytz.timezone(tz_name))


def get_local_date():
    return get_local_time().date()
