"""Tests for pa_common.id_generator and pa_common.datetime_utils."""

from datetime import UTC, date, datetime
from unittest.mock import patch

import pytest

from src.pa_common.datetime_utils import local_midnight, local_today, utc_now
from src.pa_common.id_generator import SnowflakeIdGenerator, generate_ticket_id


class TestSnowflakeIdGenerator:
    def test_returns_str(self) -> None:
        assert isinstance(SnowflakeIdGenerator(machine_id=1).next_id(), str)

    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current

    def test_machine_id_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(machine_id=1024)

    def test_clock_stepping_back_keeps_order(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=3)
        with patch.object(gen, "_current_ms", return_value=1_800_000_000_000):
            first = int(gen.next_id())
        with patch.object(gen, "_current_ms", return_value=1_799_999_999_000):
            second = int(gen.next_id())
        assert second > first

    def test_sequence_wrap_with_clock_behind_does_not_spin(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        gen = SnowflakeIdGenerator(machine_id=3)
        last = 1_800_000_000_000
        gen._last_timestamp_ms = last
        gen._sequence = gen._MAX_SEQUENCE
        with (
            patch.object(gen, "_current_ms", return_value=last - 5_000),
            caplog.at_level("WARNING", logger="src.pa_common.id_generator"),
        ):
            issued = int(gen.next_id())

        assert issued >> 22 == last + 1 - SnowflakeIdGenerator._EPOCH_MS
        assert issued & 0xFFF == 0
        assert "clock is 5000 ms behind" in caplog.text

    def test_module_helper(self) -> None:
        assert generate_ticket_id() != generate_ticket_id()


class TestDatetimeUtils:
    def test_utc_now_is_aware_utc(self) -> None:
        now = utc_now()
        assert now.tzinfo == UTC

    def test_local_midnight_utc(self) -> None:
        now = datetime(2026, 3, 14, 17, 45, tzinfo=UTC)
        assert local_midnight(now, "UTC") == datetime(2026, 3, 14, tzinfo=UTC)

    def test_local_midnight_other_zone(self) -> None:
        # 03:00 UTC is still the previous evening in New York
        now = datetime(2026, 3, 14, 3, 0, tzinfo=UTC)
        midnight = local_midnight(now, "America/New_York")
        assert midnight.date() == date(2026, 3, 13)
        assert midnight.hour == 0
        assert midnight <= now

    def test_local_today(self) -> None:
        now = datetime(2026, 3, 14, 3, 0, tzinfo=UTC)
        assert local_today(now, "UTC") == date(2026, 3, 14)
        assert local_today(now, "America/Los_Angeles") == date(2026, 3, 13)
