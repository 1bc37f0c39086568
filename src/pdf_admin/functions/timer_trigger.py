"""Timer trigger blueprint — scheduled folder sync from the drive provider."""

import logging

import azure.functions as func

from pdf_admin.config import load_config
from pdf_admin.orchestration.session import session_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.timer_trigger(
    schedule="0 0 */6 * * *",
    arg_name="timer",
    run_on_startup=False,
)
def timer_trigger(timer: func.TimerRequest) -> None:
    """Scheduled folder sync.

    Runs every six hours, reconciles the drive folder listing against the
    cache and logs the resulting counts.
    """
    logger.info("Timer trigger fired")

    try:
        if timer.past_due:
            logger.warning("Timer trigger is past due")

        config = load_config()
        with session_from_config(config) as session:
            report = session.sync_folders()
        logger.info("Scheduled folder sync complete; %s", report.summary.message())

    except Exception:
        logger.exception("Timer trigger failed")
        raise
