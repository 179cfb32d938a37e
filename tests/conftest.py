"""Shared test fixtures."""

# ruff: noqa: E402  -- JWT_SECRET must be set before config.settings is imported

import os

os.environ.setdefault("JWT_SECRET", "test-secret-for-unit-tests-only")

import pytest

from src.pa_ticket.application.service import TicketApplicationService
from tests.fakes import (
    T0,
    FakeAccountRepository,
    FakeClock,
    FakeQuestionRepository,
    FakeSession,
    FakeStore,
    FakeTicketRepository,
    sequential_ids,
)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def db(store: FakeStore) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def ticket_service(clock: FakeClock) -> TicketApplicationService:
    return TicketApplicationService(
        ticket_repo=FakeTicketRepository(),
        account_repo=FakeAccountRepository(),
        question_repo=FakeQuestionRepository(),
        clock=clock,
        id_factory=sequential_ids(),
        min_wager=1,
        max_wager=5,
    )
