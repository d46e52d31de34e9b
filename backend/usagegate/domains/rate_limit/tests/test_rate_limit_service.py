"""Unit tests for RateLimitService over fakes."""

import pytest

from usagegate.domains.rate_limit.cache import RateLimitCache
from usagegate.domains.rate_limit.fakes import FakeRateLimitService
from usagegate.domains.rate_limit.protocols import RateLimitServiceProtocol
from usagegate.domains.rate_limit.service import RateLimitService
from usagegate.domains.rate_limit.tests.conftest import (
    JAN_END_MS,
    JAN_START_MS,
    _make_record,
    _make_scheduler,
)
from usagegate.domains.rate_limit.types import UNKNOWN_DECISION, LimitKind, RateLimitDecision


def _make_service(records=None, usage=None):
    scheduler, cache, store, source, dispatcher, metrics, reporter = _make_scheduler(records, usage)
    return RateLimitService(cache=cache, scheduler=scheduler), dispatcher


ACME = dict(
    org_name="Acme",
    owner_email="a@acme.io",
    retention_days=7,
)


# ---------------------------------------------------------------------------
# check_limit
# ---------------------------------------------------------------------------


class TestCheckLimit:
    @pytest.mark.asyncio
    async def test_limited_organization(self):
        service, dispatcher = _make_service(
            [_make_record("t1", "o1", monthly_limit=1000, **ACME)], {"t1": 1500}
        )
        await service.start()
        try:
            decision = service.check_limit("o1", "organization", "operations-reporting")
        finally:
            await service.stop()

        assert decision == RateLimitDecision(current=1500, quota=1000, limited=True)
        assert len(dispatcher.delivered) == 1
        _, template = next(iter(dispatcher.delivered.values()))
        assert template.organization.id == "o1"
        assert (template.organization.period.start, template.organization.period.end) == (
            JAN_START_MS,
            JAN_END_MS,
        )

    @pytest.mark.asyncio
    async def test_zero_quota_is_never_limited(self):
        service, dispatcher = _make_service(
            [_make_record("t1", "o1", monthly_limit=0, **ACME)], {"t1": 1500}
        )
        await service.start()
        try:
            decision = service.check_limit("t1", "target", LimitKind.OPERATIONS_REPORTING)
        finally:
            await service.stop()

        assert decision == RateLimitDecision(current=1500, quota=0, limited=False)
        assert dispatcher.calls == []

    @pytest.mark.asyncio
    async def test_other_limit_kind_is_unknown(self):
        service, _ = _make_service([_make_record(monthly_limit=1)], {"t1": 10})
        await service.start()
        try:
            assert service.check_limit("o1", "organization", "storage") == UNKNOWN_DECISION
        finally:
            await service.stop()

    @pytest.mark.asyncio
    async def test_unregistered_entities_are_unknown(self):
        service, _ = _make_service([_make_record()], {"t1": 10})
        await service.start()
        try:
            assert service.check_limit("nope", "organization", "operations-reporting") == UNKNOWN_DECISION
            assert service.check_limit("nope", "target", "operations-reporting") == UNKNOWN_DECISION
        finally:
            await service.stop()

    def test_before_start_everything_is_unknown(self):
        service, _ = _make_service([_make_record()], {"t1": 10})
        assert service.check_limit("o1", "organization", "operations-reporting") == UNKNOWN_DECISION
        assert not service.readiness()


# ---------------------------------------------------------------------------
# get_retention / readiness
# ---------------------------------------------------------------------------


class TestRetentionAndReadiness:
    @pytest.mark.asyncio
    async def test_retention(self):
        service, _ = _make_service([_make_record("t1", "o1", **ACME)], {})
        await service.start()
        try:
            assert service.get_retention("t1") == 7
            assert service.get_retention("unknown-target") == 30
        finally:
            await service.stop()

    @pytest.mark.asyncio
    async def test_readiness_follows_lifecycle(self):
        service, _ = _make_service([_make_record()], {})
        assert not service.readiness()

        await service.start()
        assert service.readiness()

        await service.stop()
        assert not service.readiness()


# ---------------------------------------------------------------------------
# Fake
# ---------------------------------------------------------------------------


class TestFakeRateLimitService:
    def test_satisfies_protocol(self):
        assert isinstance(FakeRateLimitService(), RateLimitServiceProtocol)
        assert isinstance(
            RateLimitService(cache=RateLimitCache(), scheduler=_make_scheduler()[0]),
            RateLimitServiceProtocol,
        )

    def test_canned_answers(self):
        fake = FakeRateLimitService()
        fake.set_decision("o1", RateLimitDecision(1, 2, False))
        fake.set_retention("t1", 3)

        assert fake.check_limit("o1", "organization", "operations-reporting").quota == 2
        assert fake.check_limit("o2", "organization", "operations-reporting") == UNKNOWN_DECISION
        assert fake.get_retention("t1") == 3
        assert fake.get_retention("t2") == 30
