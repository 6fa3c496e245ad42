"""
Unit tests for the court notify sweep.

Runs the sweep against a real SQLite-backed store with a fake email dispatcher.
"""
import pytest

from conftest import SITE_BASE_URL, FakeDispatcher
from vacantcourt.core.errors import StoreError
from vacantcourt.services.court_notify_service import (
    available_sub_courts,
    build_template_params,
    court_url,
    partition_by_court,
    run_court_notify_sweep,
)
from vacantcourt.services.store.types import FacilityRecord, NotificationRequestRecord, SubCourtRecord


def _sweep(store, dispatcher, **kwargs):
    kwargs.setdefault("site_base_url", SITE_BASE_URL)
    return run_court_notify_sweep(store, dispatcher, **kwargs)


class TestSweepScenarios:
    """The five reference scenarios."""

    def test_in_use_court_sends_nothing_and_keeps_request(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "in-use"}])
        rid = add_request("C1", "a@x.com")

        summary = _sweep(store, dispatcher)

        assert dispatcher.attempts == []
        assert summary.emails_sent == 0
        assert summary.considered == 1
        assert request_ids() == {rid}

    def test_available_court_emails_and_deletes(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", name="Riverside Tennis", courts=[{"name": "Court A", "status": "available"}])
        add_request("C1", "a@x.com")

        summary = _sweep(store, dispatcher)

        assert dispatcher.recipients == ["a@x.com"]
        params = dispatcher.sent[0][1]
        assert params["sub_court_names"] == "Court A"
        assert params["court_name"] == "Riverside Tennis"
        assert "/court/C1" in params["court_url"]
        assert params["to_email"] == "a@x.com"
        assert summary.emails_sent == 1
        assert summary.deleted == 1
        assert request_ids() == set()

    def test_missing_facility_request_deleted_without_email(self, store, dispatcher, add_request, request_ids):
        add_request("C-missing", "a@x.com")

        summary = _sweep(store, dispatcher)

        assert dispatcher.attempts == []
        assert summary.stale_cleaned == 1
        assert request_ids() == set()

    def test_two_users_same_available_facility(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        add_request("C1", "a@x.com", user_id="u-a")
        add_request("C1", "b@x.com", user_id="u-b")

        summary = _sweep(store, dispatcher)

        assert sorted(dispatcher.recipients) == ["a@x.com", "b@x.com"]
        for to, params in dispatcher.sent:
            assert params["to_email"] == to
        assert summary.emails_sent == 2
        assert summary.deleted == 2
        assert request_ids() == set()

    def test_empty_collection_is_a_no_op(self, dispatcher):
        class EmptyStore:
            deletes = 0

            def list_notification_requests(self):
                from vacantcourt.services.store.types import RequestScan

                return RequestScan()

            def get_facility(self, court_id):
                raise AssertionError("no facility reads expected")

            def delete_notification_request(self, request_id):
                EmptyStore.deletes += 1
                return True

        summary = _sweep(EmptyStore(), dispatcher)

        assert summary.considered == 0
        assert summary.emails_sent == 0
        assert summary.message() == "Processed 0 requests. Sent 0 emails. Cleaned 0 stale requests."
        assert EmptyStore.deletes == 0
        assert dispatcher.attempts == []


class TestSweepProperties:
    def test_second_sweep_is_a_no_op(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        add_facility("C2", courts=[{"name": "Court B", "status": "in-use"}])
        add_request("C1", "a@x.com")
        kept = add_request("C2", "b@x.com")

        _sweep(store, dispatcher)
        second = FakeDispatcher()
        summary = _sweep(store, second)

        assert second.attempts == []
        assert summary.deleted == 0
        assert request_ids() == {kept}

    def test_send_failure_keeps_request_other_facility_still_deleted(
        self, store, add_facility, add_request, request_ids
    ):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        add_facility("C2", courts=[{"name": "Court B", "status": "available"}])
        failed = add_request("C1", "a@x.com")
        add_request("C2", "b@x.com")
        dispatcher = FakeDispatcher(fail_for={"a@x.com"})

        summary = _sweep(store, dispatcher)

        assert request_ids() == {failed}
        assert summary.emails_sent == 1
        assert summary.email_failures == 1

    def test_send_failure_within_one_facility_only_keeps_that_request(
        self, store, add_facility, add_request, request_ids
    ):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        failed = add_request("C1", "a@x.com", user_id="u-a")
        add_request("C1", "b@x.com", user_id="u-b")
        dispatcher = FakeDispatcher(fail_for={"a@x.com"})

        _sweep(store, dispatcher)

        assert sorted(dispatcher.attempts) == ["a@x.com", "b@x.com"]
        assert request_ids() == {failed}

    def test_duplicate_requests_same_user_each_processed(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        add_request("C1", "a@x.com", user_id="u-a")
        add_request("C1", "a@x.com", user_id="u-a")

        summary = _sweep(store, dispatcher)

        assert dispatcher.recipients == ["a@x.com", "a@x.com"]
        assert summary.deleted == 2
        assert request_ids() == set()

    def test_invalid_records_skipped_not_deleted(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        no_email = add_request("C1", None)
        no_court = add_request(None, "c@x.com")
        add_request("C1", "a@x.com")

        summary = _sweep(store, dispatcher)

        assert summary.invalid_skipped == 2
        assert summary.considered == 1
        assert dispatcher.recipients == ["a@x.com"]
        assert request_ids() == {no_email, no_court}

    def test_lists_all_available_sub_courts_in_order(self, store, dispatcher, add_facility, add_request):
        add_facility(
            "C1",
            courts=[
                {"name": "Court 1", "status": "available"},
                {"name": "Court 2", "status": "in-use"},
                {"name": "Court 3", "status": "available"},
                {"name": "Court 4", "status": "maintenance"},
            ],
        )
        add_request("C1", "a@x.com")

        _sweep(store, dispatcher)

        assert dispatcher.sent[0][1]["sub_court_names"] == "Court 1, Court 3"

    def test_runs_sequentially_with_one_worker(self, store, dispatcher, add_facility, add_request, request_ids):
        for i in range(5):
            add_facility(f"C{i}", courts=[{"name": "A", "status": "available"}])
            add_request(f"C{i}", f"u{i}@x.com", user_id=f"u{i}")

        summary = _sweep(store, dispatcher, max_workers=1)

        assert summary.emails_sent == 5
        assert request_ids() == set()


class TestAvailabilityPredicate:
    def test_configured_predicate_ignores_unconfigured_sub_court(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "available", "is_configured": False}])
        rid = add_request("C1", "a@x.com")

        _sweep(store, dispatcher, predicate="configured")

        assert dispatcher.attempts == []
        assert request_ids() == {rid}

    def test_status_only_predicate_notifies_unconfigured_sub_court(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "available", "is_configured": False}])
        add_request("C1", "a@x.com")

        _sweep(store, dispatcher, predicate="status_only")

        assert dispatcher.recipients == ["a@x.com"]
        assert request_ids() == set()

    def test_unknown_predicate_rejected_before_any_read(self, dispatcher):
        class NoReads:
            def list_notification_requests(self):
                raise AssertionError("must not read")

        with pytest.raises(ValueError):
            _sweep(NoReads(), dispatcher, predicate="whatever")


class _FlakyStore:
    """Wraps a real store; fails facility reads or deletes for chosen ids."""

    def __init__(self, inner, fail_get: set[str] = frozenset(), fail_delete: set[str] = frozenset()):
        self._inner = inner
        self.fail_get = set(fail_get)
        self.fail_delete = set(fail_delete)
        self.deleted: list[str] = []

    def list_notification_requests(self):
        return self._inner.list_notification_requests()

    def get_facility(self, court_id):
        if court_id in self.fail_get:
            raise StoreError(f"get facility {court_id} failed")
        return self._inner.get_facility(court_id)

    def delete_notification_request(self, request_id):
        if request_id in self.fail_delete:
            raise StoreError(f"delete {request_id} failed")
        self.deleted.append(request_id)
        return self._inner.delete_notification_request(request_id)


class TestPartialFailures:
    def test_full_list_failure_propagates(self, dispatcher):
        class Down:
            def list_notification_requests(self):
                raise StoreError("store unavailable")

        with pytest.raises(StoreError):
            _sweep(Down(), dispatcher)

    def test_facility_read_failure_leaves_requests_and_continues(
        self, store, dispatcher, add_facility, add_request, request_ids
    ):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        add_facility("C2", courts=[{"name": "Court B", "status": "available"}])
        kept = add_request("C1", "a@x.com")
        add_request("C2", "b@x.com")

        summary = _sweep(_FlakyStore(store, fail_get={"C1"}), dispatcher)

        assert dispatcher.recipients == ["b@x.com"]
        assert summary.facility_errors == 1
        assert request_ids() == {kept}

    def test_delete_failure_does_not_stop_other_deletes(
        self, store, dispatcher, add_facility, add_request, request_ids
    ):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        stuck = add_request("C1", "a@x.com", user_id="u-a")
        add_request("C1", "b@x.com", user_id="u-b")
        add_request("C-gone", "c@x.com", user_id="u-c")

        summary = _sweep(_FlakyStore(store, fail_delete={stuck}), dispatcher)

        assert summary.emails_sent == 2
        assert summary.delete_failures == 1
        assert summary.deleted == 2
        assert request_ids() == {stuck}

    def test_already_deleted_request_is_not_an_error(self, store, dispatcher, add_facility, add_request):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        rid = add_request("C1", "a@x.com")

        class RacingStore(_FlakyStore):
            """Another sweep deletes the request between our send and our delete."""

            def delete_notification_request(self, request_id):
                self._inner.delete_notification_request(request_id)
                return self._inner.delete_notification_request(request_id)

        summary = _sweep(RacingStore(store), dispatcher)

        assert summary.emails_sent == 1
        assert summary.delete_failures == 0
        assert summary.already_gone == 1
        assert not store.delete_notification_request(rid)

    def test_budget_exhausted_defers_facilities(self, store, dispatcher, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        rid = add_request("C1", "a@x.com")
        ticks = iter([0.0, 100.0, 100.0, 100.0])

        summary = _sweep(store, dispatcher, budget_seconds=10, clock=lambda: next(ticks))

        assert summary.deferred_facilities == 1
        assert dispatcher.attempts == []
        assert request_ids() == {rid}

    def test_budget_stops_sends_within_a_facility(self, store, add_facility, add_request, request_ids):
        add_facility("C1", courts=[{"name": "Court A", "status": "available"}])
        rids = {add_request("C1", f"user{i}@x.com", user_id=f"user-{i}") for i in range(5)}
        now = [0.0]

        class SlowDispatcher(FakeDispatcher):
            def send(self, to_email, template_params):
                super().send(to_email, template_params)
                now[0] += 30.0

        slow = SlowDispatcher()
        summary = _sweep(store, slow, budget_seconds=50, clock=lambda: now[0])

        assert summary.emails_sent == 2
        assert summary.deferred_facilities == 1
        assert summary.deleted == 2
        remaining = request_ids()
        assert len(remaining) == 3
        assert remaining <= rids
        assert len(slow.attempts) == 2


class TestHelpers:
    def test_court_url(self):
        assert court_url("https://vacantcourt.test", "C1") == "https://vacantcourt.test/court/C1"
        assert court_url("https://vacantcourt.test/", "C1") == "https://vacantcourt.test/court/C1"

    def test_partition_by_court_keeps_order(self):
        reqs = [
            NotificationRequestRecord(id="1", court_id="A", user_email="a@x.com"),
            NotificationRequestRecord(id="2", court_id="B", user_email="b@x.com"),
            NotificationRequestRecord(id="3", court_id="A", user_email="c@x.com"),
        ]
        grouped = partition_by_court(reqs)
        assert list(grouped) == ["A", "B"]
        assert [r.id for r in grouped["A"]] == ["1", "3"]

    def test_available_sub_courts_and_template_params(self):
        facility = FacilityRecord(
            id="C9",
            name="Harbor Courts",
            courts=(
                SubCourtRecord(id="s1", name="North", status="available", is_configured=True),
                SubCourtRecord(id="s2", name="South", status="available", is_configured=False),
            ),
        )
        open_courts = available_sub_courts(facility, "configured")
        assert [c.name for c in open_courts] == ["North"]
        assert [c.name for c in available_sub_courts(facility, "status_only")] == ["North", "South"]

        req = NotificationRequestRecord(id="r", court_id="C9", user_email="a@x.com")
        assert build_template_params(req, facility, open_courts, "https://site") == {
            "to_email": "a@x.com",
            "court_name": "Harbor Courts",
            "sub_court_names": "North",
            "court_url": "https://site/court/C9",
        }
