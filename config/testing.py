import os

from config.base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", "instance/terminal-test.db")
RESULT_RESET_SECONDS = 1.0
