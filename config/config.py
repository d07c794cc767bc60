import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "timesheet-dev-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "timesheet_db")

    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))

    # Hour at which entries created from a grid cell or a manual line begin.
    CELL_DEFAULT_START_HOUR = int(os.environ.get("CELL_DEFAULT_START_HOUR", "9"))


SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

DEBUG = bool(int(os.environ.get("DEBUG", "1")))

AUTO_INIT_DB = Config.AUTO_INIT_DB
CELL_DEFAULT_START_HOUR = Config.CELL_DEFAULT_START_HOUR
