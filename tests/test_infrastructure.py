from datetime import time, timedelta

from config import get_settings_module
from src.timesheet_system.timesheet_system.database.bootstrap import iter_sql_statements
from src.timesheet_system.timesheet_system.database.mysql_base import mysql_duration_to_str


def test_settings_module_follows_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "Production")
    assert get_settings_module() == "config.production"
    assert get_settings_module("test") == "config.testing"
    assert get_settings_module("staging") == "config.development"


def test_sql_splitter_ignores_comments_and_quoted_semicolons():
    sql = """
    -- demo data
    INSERT INTO projects (name) VALUES ('Alpha; Beta');
    INSERT INTO tasks (title) VALUES ("it's done");
    SELECT 1
    """

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO projects (name) VALUES ('Alpha; Beta')",
        "INSERT INTO tasks (title) VALUES (\"it's done\")",
        "SELECT 1",
    ]


def test_mysql_time_columns_render_as_hms():
    assert mysql_duration_to_str(timedelta(hours=120)) == "120:00:00"
    assert mysql_duration_to_str(time(8, 30)) == "08:30:00"
    assert mysql_duration_to_str(b"01:00:00") == "01:00:00"
    assert mysql_duration_to_str("  ") is None
    assert mysql_duration_to_str(None) is None
