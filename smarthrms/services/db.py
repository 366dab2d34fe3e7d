import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING
import os
from dotenv import load_dotenv

# Import logging
from smarthrms.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

# Load environment variables from .env
load_dotenv()

MONGO_DETAILS = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "smarthrms_db")

logger.info(f"Initializing MongoDB connection to database: {DB_NAME}")

# Initialize client (connects lazily on first operation)
try:
    client = motor.motor_asyncio.AsyncIOMotorClient(MONGO_DETAILS)
    db = client[DB_NAME]
    logger.info("MongoDB client initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize MongoDB client: {e}")
    raise

# Collections
employees_coll = db["employees"]
tasks_coll = db["tasks"]
leaves_coll = db["leave_requests"]
attendance_coll = db["attendance"]
reports_coll = db["reports"]

INDEXES = [
    (employees_coll, [("employee_id", ASCENDING)], {"unique": True}),
    (employees_coll, [("email", ASCENDING)], {"unique": True}),
    (employees_coll, [("department", ASCENDING)], {}),
    (tasks_coll, [("task_id", ASCENDING)], {"unique": True}),
    (tasks_coll, [("assigned_to", ASCENDING)], {}),
    (tasks_coll, [("status", ASCENDING)], {}),
    (leaves_coll, [("leave_id", ASCENDING)], {"unique": True}),
    (leaves_coll, [("employee_id", ASCENDING)], {}),
    (attendance_coll, [("attendance_id", ASCENDING)], {"unique": True}),
    # one attendance record per employee per day
    (attendance_coll, [("employee_id", ASCENDING), ("date", ASCENDING)], {"unique": True}),
    (reports_coll, [("report_id", ASCENDING)], {"unique": True}),
    (reports_coll, [("generated_at", DESCENDING)], {}),
]


@log_function_call
async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    failures = 0
    for coll, keys, options in INDEXES:
        label = f"{coll.name}.({', '.join(k for k, _ in keys)})"
        try:
            await coll.create_index(keys, **options)
            logger.debug(f"Created index on {label}")
        except Exception as e:
            if "already exists" in str(e).lower():
                logger.debug(f"Index on {label} already exists")
            else:
                failures += 1
                logger.warning(f"Could not create index on {label}: {e}")

    if failures:
        logger.warning(f"Database index initialization finished with {failures} failure(s)")
        logger.info("Application will continue without all indexes - some operations may be slower")
    else:
        logger.info("Database index initialization completed successfully")
    return failures
