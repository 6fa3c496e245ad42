"""
Notify users when a facility has an available sub-court. The scheduler runs one sweep per minute;
a request lives until its email is sent (then deleted) or its facility disappears (stale, deleted).

Sweep, per invocation:
  1. list all notification requests (invalid rows are skipped and counted);
  2. group by court_id; for each facility (in parallel, bounded pool):
     missing -> every request is stale; no available sub-court -> leave requests pending;
     otherwise send one email per request and mark it for deletion only after a successful send;
  3. delete marked requests as independent operations (already-gone is fine).
Overlapping sweeps can both send for the same request before either deletes it: duplicate email
is accepted, a crash is not.
"""
import logging
import time
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable
from urllib.parse import quote

from vacantcourt.core.constants import COURT_PATH_TEMPLATE
from vacantcourt.core.errors import (
    MSG_COURT_NOT_FOUND,
    MSG_NO_NOTIFY_EMAIL,
    MSG_REQUEST_NOT_FOUND,
    STATUS_BAD_REQUEST,
    EmailDispatchError,
    NotFoundError,
    RequestError,
    StoreError,
)
from vacantcourt.services.email.base import EmailDispatcher
from vacantcourt.services.store.base import FacilityStore
from vacantcourt.services.store.types import FacilityRecord, NotificationRequestRecord, SubCourtRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Available-sub-court predicate (NOTIFY_AVAILABILITY_PREDICATE)
# ---------------------------------------------------------------------------


def _configured_and_available(sub_court: SubCourtRecord) -> bool:
    return sub_court.is_available and sub_court.is_configured


def _available(sub_court: SubCourtRecord) -> bool:
    return sub_court.is_available


PREDICATES: dict[str, Callable[[SubCourtRecord], bool]] = {
    "configured": _configured_and_available,
    "status_only": _available,
}
DEFAULT_PREDICATE = "configured"


def available_sub_courts(facility: FacilityRecord, predicate: str = DEFAULT_PREDICATE) -> list[SubCourtRecord]:
    """Sub-courts that satisfy a pending request, in facility order."""
    check = PREDICATES[predicate]
    return [c for c in facility.courts if check(c)]


def court_url(site_base_url: str, court_id: str) -> str:
    return site_base_url.rstrip("/") + COURT_PATH_TEMPLATE.format(court_id=quote(court_id, safe=""))


def build_template_params(
    request: NotificationRequestRecord,
    facility: FacilityRecord,
    sub_courts: list[SubCourtRecord],
    site_base_url: str,
) -> dict[str, str]:
    return {
        "to_email": request.user_email,
        "court_name": facility.name,
        "sub_court_names": ", ".join(c.name for c in sub_courts),
        "court_url": court_url(site_base_url, facility.id),
    }


def partition_by_court(requests: list[NotificationRequestRecord]) -> dict[str, list[NotificationRequestRecord]]:
    by_court: dict[str, list[NotificationRequestRecord]] = defaultdict(list)
    for r in requests:
        by_court[r.court_id].append(r)
    return dict(by_court)


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


@dataclass
class SweepSummary:
    considered: int = 0
    invalid_skipped: int = 0
    emails_sent: int = 0
    email_failures: int = 0
    stale_cleaned: int = 0
    deleted: int = 0
    already_gone: int = 0
    delete_failures: int = 0
    facility_errors: int = 0
    deferred_facilities: int = 0
    errors: list[str] = field(default_factory=list)

    def message(self) -> str:
        return (
            f"Processed {self.considered} requests. Sent {self.emails_sent} emails. "
            f"Cleaned {self.stale_cleaned} stale requests."
        )


@dataclass
class _FacilityOutcome:
    court_id: str
    to_delete: list[str] = field(default_factory=list)
    stale: int = 0
    sent: int = 0
    send_failures: int = 0
    deferred: bool = False
    read_failed: bool = False
    errors: list[str] = field(default_factory=list)


def _process_facility(
    store: FacilityStore,
    dispatcher: EmailDispatcher,
    court_id: str,
    requests: list[NotificationRequestRecord],
    *,
    site_base_url: str,
    predicate: str,
    deadline: float | None,
    clock: Callable[[], float],
) -> _FacilityOutcome:
    out = _FacilityOutcome(court_id=court_id)
    if deadline is not None and clock() >= deadline:
        out.deferred = True
        return out
    try:
        facility = store.get_facility(court_id)
    except StoreError as e:
        logger.warning("Court notify: could not read facility %s (requests stay pending): %s", court_id, e)
        out.read_failed = True
        out.errors.append(str(e))
        return out

    if facility is None:
        logger.info("Court %s does not exist; deleting %s stale request(s)", court_id, len(requests))
        out.to_delete = [r.id for r in requests]
        out.stale = len(requests)
        return out

    open_courts = available_sub_courts(facility, predicate)
    if not open_courts:
        logger.debug("Court %s (%s) has no available sub-court; %s request(s) stay", facility.name, court_id, len(requests))
        return out

    logger.info(
        "Court %s (%s) available: [%s]; notifying %s user(s)",
        facility.name, court_id, ", ".join(c.name for c in open_courts), len(requests),
    )
    for i, r in enumerate(requests):
        if deadline is not None and clock() >= deadline:
            logger.warning(
                "Court notify: time budget reached at %s; %s request(s) left for next sweep", court_id, len(requests) - i
            )
            out.deferred = True
            break
        params = build_template_params(r, facility, open_courts, site_base_url)
        try:
            dispatcher.send(r.user_email, params)
        except EmailDispatchError as e:
            logger.warning("Court notify: email to %s for %s failed (request kept): %s", r.user_email, court_id, e)
            out.send_failures += 1
            out.errors.append(str(e))
            continue
        except Exception as e:
            logger.exception("Court notify: unexpected error emailing %s for %s: %s", r.user_email, court_id, e)
            out.send_failures += 1
            out.errors.append(str(e))
            continue
        out.sent += 1
        out.to_delete.append(r.id)
    return out


def _delete_requests(store: FacilityStore, request_ids: list[str], max_workers: int) -> tuple[int, int, list[str]]:
    """Independent concurrent deletes. Returns (deleted, already_gone, errors); one failure never cancels others."""
    deleted = 0
    already_gone = 0
    errors: list[str] = []
    if not request_ids:
        return deleted, already_gone, errors
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(request_ids))), thread_name_prefix="notify_delete") as executor:
        future_to_id = {executor.submit(store.delete_notification_request, rid): rid for rid in request_ids}
        for future in as_completed(future_to_id):
            rid = future_to_id[future]
            try:
                if future.result():
                    deleted += 1
                else:
                    already_gone += 1
            except Exception as e:
                logger.warning("Court notify: delete of request %s failed (next sweep may notify again): %s", rid, e)
                errors.append(f"delete {rid}: {e}")
    return deleted, already_gone, errors


def run_court_notify_sweep(
    store: FacilityStore,
    dispatcher: EmailDispatcher,
    *,
    site_base_url: str,
    predicate: str = DEFAULT_PREDICATE,
    max_workers: int = 4,
    budget_seconds: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> SweepSummary:
    """
    One complete sweep. Raises StoreError only when the full request list cannot be read;
    every other failure is logged, counted in the summary and left for the next sweep.
    """
    if predicate not in PREDICATES:
        raise ValueError(f"Unknown availability predicate: {predicate}")
    summary = SweepSummary()
    scan = store.list_notification_requests()
    summary.considered = len(scan.requests)
    summary.invalid_skipped = len(scan.invalid_ids)
    if not scan.requests:
        logger.info("Court notify: no pending requests")
        return summary

    by_court = partition_by_court(scan.requests)
    logger.info("Court notify: %s request(s) across %s facilit(ies)", summary.considered, len(by_court))
    deadline = clock() + budget_seconds if budget_seconds else None

    to_delete: list[str] = []
    workers = max(1, min(max_workers, len(by_court)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="court_notify") as executor:
        future_to_court = {
            executor.submit(
                _process_facility,
                store,
                dispatcher,
                court_id,
                reqs,
                site_base_url=site_base_url,
                predicate=predicate,
                deadline=deadline,
                clock=clock,
            ): court_id
            for court_id, reqs in by_court.items()
        }
        for future in as_completed(future_to_court):
            court_id = future_to_court[future]
            try:
                out = future.result()
            except Exception as e:
                logger.exception("Court notify: facility %s raised: %s", court_id, e)
                summary.facility_errors += 1
                summary.errors.append(f"{court_id}: {e}")
                continue
            if out.deferred:
                summary.deferred_facilities += 1
            if out.read_failed:
                summary.facility_errors += 1
            summary.emails_sent += out.sent
            summary.email_failures += out.send_failures
            summary.stale_cleaned += out.stale
            summary.errors.extend(out.errors)
            to_delete.extend(out.to_delete)

    if summary.deferred_facilities:
        logger.warning(
            "Court notify: time budget reached; %s facilit(ies) deferred to next sweep", summary.deferred_facilities
        )

    deleted, already_gone, delete_errors = _delete_requests(store, to_delete, max_workers)
    summary.deleted = deleted
    summary.already_gone = already_gone
    summary.delete_failures = len(delete_errors)
    summary.errors.extend(delete_errors)

    logger.info(
        "Court notify: finished. considered=%s sent=%s email_failures=%s stale=%s deleted=%s delete_failures=%s",
        summary.considered, summary.emails_sent, summary.email_failures,
        summary.stale_cleaned, summary.deleted, summary.delete_failures,
    )
    return summary


# ---------------------------------------------------------------------------
# User-facing: subscribe, look up, cancel
# ---------------------------------------------------------------------------


def start_court_notify(store: FacilityStore, court_id: str, user_id: str, user_email: str) -> dict:
    """Register: email user_email when this facility has an available sub-court.
    Looks up the user's existing request first, so repeated calls return the same id."""
    if not (user_email or "").strip():
        raise RequestError(MSG_NO_NOTIFY_EMAIL, STATUS_BAD_REQUEST)
    court_id = (court_id or "").strip()
    facility = store.get_facility(court_id) if court_id else None
    if facility is None:
        raise NotFoundError(MSG_COURT_NOT_FOUND)
    existing = store.find_notification_request(court_id, user_id)
    if existing:
        return {"id": existing, "created": False}
    request_id = store.add_notification_request(court_id, facility.name, user_id, user_email)
    logger.info("Notify request %s: user %s on court %s", request_id, user_id, court_id)
    return {"id": request_id, "created": True}


def get_court_notify_request(store: FacilityStore, court_id: str, user_id: str) -> dict:
    """The user's active request id for this facility, or None."""
    return {"id": store.find_notification_request((court_id or "").strip(), user_id)}


def cancel_court_notify(store: FacilityStore, request_id: str, user_id: str) -> dict:
    """Remove the user's own notify request."""
    if not store.remove_notification_request(request_id, user_id):
        raise NotFoundError(MSG_REQUEST_NOT_FOUND)
    return {"ok": True}
