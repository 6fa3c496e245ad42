"""Runs every 1 min: email users whose requested facility has an available sub-court, then delete those requests.

The store and email dispatcher are built once at startup (build_court_notify_context) and passed in;
each tick is a full stateless sweep. Also runnable once from a system cron:
  python -m vacantcourt.scheduler.court_notify_job
"""
import logging
import sys
from dataclasses import dataclass

from typing import Callable

from sqlalchemy.orm import Session

from vacantcourt.config import Settings, missing_notify_settings
from vacantcourt.core.constants import JOB_STATUS_FAILED, JOB_STATUS_OK
from vacantcourt.core.errors import ConfigurationError, StoreError
from vacantcourt.services.court_notify_service import run_court_notify_sweep
from vacantcourt.services.email import EmailDispatcher, build_dispatcher
from vacantcourt.services.store import FacilityStore, SqlFacilityStore

logger = logging.getLogger(__name__)


@dataclass
class CourtNotifyContext:
    settings: Settings
    store: FacilityStore
    dispatcher: EmailDispatcher


@dataclass(frozen=True)
class JobResult:
    status_code: int
    body: str


def build_court_notify_context(
    s: Settings, session_factory: Callable[[], Session] | None = None
) -> CourtNotifyContext:
    """Construct the store and dispatcher handles once. No network or DB access happens here."""
    if session_factory is None:
        from vacantcourt.db.session import new_session

        session_factory = new_session
    return CourtNotifyContext(
        settings=s,
        store=SqlFacilityStore(session_factory),
        dispatcher=build_dispatcher(s),
    )


def check_notify_settings(s: Settings) -> None:
    missing = missing_notify_settings(s)
    if missing:
        raise ConfigurationError(missing)


def run_court_notify_job(ctx: CourtNotifyContext) -> JobResult:
    """One sweep. Configuration or full-list read failures return 500 and do no partial work."""
    s = ctx.settings
    try:
        check_notify_settings(s)
        summary = run_court_notify_sweep(
            ctx.store,
            ctx.dispatcher,
            site_base_url=s.site_base_url,
            predicate=s.notify_availability_predicate,
            max_workers=s.notify_max_workers,
            budget_seconds=s.notify_job_budget_seconds,
        )
    except ConfigurationError as e:
        logger.error("Court notify job not run: %s", e)
        return JobResult(JOB_STATUS_FAILED, str(e))
    except StoreError as e:
        logger.exception("Court notify job failed reading notification requests: %s", e)
        return JobResult(JOB_STATUS_FAILED, f"An error occurred: {e}")
    return JobResult(JOB_STATUS_OK, summary.message())


def main() -> int:
    from vacantcourt.config import settings

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        check_notify_settings(settings)
    except ConfigurationError as e:
        logger.error("Court notify job not run: %s", e)
        result = JobResult(JOB_STATUS_FAILED, str(e))
    else:
        result = run_court_notify_job(build_court_notify_context(settings))
    print(f"{result.status_code} {result.body}")
    return 0 if result.status_code == JOB_STATUS_OK else 1


if __name__ == "__main__":
    sys.exit(main())
