import logging
import sys

def setup_logging():
    """
    Configure logging for the application.

    Sends records to stdout with timestamps, log levels, and logger names,
    which is what container log collectors expect.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Reduce SQLAlchemy noise in logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("notesrole")


# Create global logger instance
logger = setup_logging()
