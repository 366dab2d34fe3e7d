import os

# quiet, console-only logging for the test run
os.environ.setdefault("ENVIRONMENT", "testing")

from smarthrms.utils.logging_config import configure_for_environment

configure_for_environment()
