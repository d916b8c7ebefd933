#!/usr/bin/env python3
"""Tests for the garage CLI formatting helpers and commands."""

from datetime import datetime, timezone

import pytest

from fleet import CargoHold, MaintenanceRecord, Signal, create_vehicle, load_vehicle
from garage import (
    describe_extras,
    format_cost,
    format_speed,
    format_when,
    main,
    make_record_table,
    make_vehicle_table,
    repeat,
    truncate,
)


# =============================================================================
# Formatting helpers
# =============================================================================


class TestFormatSpeed:
    """Tests for format_speed."""

    def test_formats_number(self):
        assert format_speed(20) == "20.0 km/h"
        assert format_speed(6.72) == "6.7 km/h"

    def test_none_returns_dash(self):
        assert format_speed(None) == "-"


class TestFormatCost:
    """Tests for format_cost."""

    def test_formats_number(self):
        assert format_cost(75.50) == "$75.50"
        assert format_cost(1250) == "$1,250.00"

    def test_none_returns_dash(self):
        assert format_cost(None) == "-"


class TestFormatWhen:
    """Tests for format_when."""

    def test_formats_timestamp(self):
        record = MaintenanceRecord("2025-01-15T10:30:00Z", "Oil", 0)
        assert format_when(record) == "2025-01-15 10:30"

    def test_invalid_timestamp(self):
        assert format_when(MaintenanceRecord("garbage", "Oil", 0)) == "-"


class TestTruncate:
    """Tests for truncate."""

    def test_short_text_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_long_text_truncated(self):
        assert truncate("hello world", 8) == "hello..."

    def test_empty_returns_dash(self):
        assert truncate("") == "-"
        assert truncate(None) == "-"


class TestDescribeExtras:
    """Tests for describe_extras."""

    def test_truck(self):
        truck = create_vehicle("truck", "Actros", "white", extras=CargoHold(5000, 1200))
        assert describe_extras(truck) == "cargo 1,200/5,000"

    def test_sports_car(self):
        assert describe_extras(create_vehicle("sports_car", "911", "silver")) == "turbo off"

    def test_plain_car(self):
        assert describe_extras(create_vehicle("car", "Civic", "red")) == "-"


class TestTables:
    """Tests for table row builders."""

    def test_vehicle_rows(self):
        civic = create_vehicle("car", "Civic", "red", vehicle_id="c1")
        rows = make_vehicle_table([civic])
        assert rows == [["c1", "car", "Civic", "red", "off", "0.0 km/h", "-", 0]]

    def test_record_rows(self):
        record = MaintenanceRecord(
            "2025-01-15T10:30:00Z", "Oil change", 250, "", record_id="maint_1"
        )
        rows = make_record_table([record])
        assert rows == [["2025-01-15 10:30", "Oil change", "$250.00", "-", "maint_1"]]


class TestRepeat:
    """Tests for repeat."""

    def test_repeats_changes(self):
        bike = create_vehicle("bicycle", "Brompton", "green")
        outcome = repeat(bike.accelerate, 3)
        assert bike.speed == 15
        assert outcome.changed

    def test_stops_at_first_unchanged(self):
        bike = create_vehicle("bicycle", "Brompton", "green")
        bike.accelerate()
        outcome = repeat(bike.brake, 4)
        assert bike.speed == 0
        assert outcome.changed
        assert outcome.signal is Signal.NOOP

    def test_stops_at_error(self):
        civic = create_vehicle("car", "Civic", "red")
        outcome = repeat(civic.accelerate, 3)
        assert outcome.signal is Signal.ERROR
        assert not outcome.changed


# =============================================================================
# Commands
# =============================================================================


@pytest.fixture
def garage(tmp_path):
    path = tmp_path / "garage.yaml"
    assert main([str(path), "init"]) == 0
    assert main([str(path), "add", "car", "Civic", "red", "--id", "c1"]) == 0
    assert main([str(path), "add", "truck", "Actros", "white", "--id", "t1"]) == 0
    return path


def run(path, *args):
    return main([str(path), *args])


class TestInitCommand:
    """Tests for the init command."""

    def test_refuses_to_overwrite(self, garage, capsys):
        assert run(garage, "init") == 1
        assert "already exists" in capsys.readouterr().out

    def test_force(self, garage):
        assert run(garage, "init", "--force") == 0
        assert run(garage, "show", "c1") == 1


class TestVehicleCommands:
    """Tests for state commands through main()."""

    def test_missing_file(self, tmp_path, capsys):
        assert run(tmp_path / "nope.yaml", "list") == 1
        assert "File not found" in capsys.readouterr().out

    def test_unknown_vehicle(self, garage, capsys):
        assert run(garage, "power-on", "nope") == 1
        assert "Error:" in capsys.readouterr().out

    def test_list(self, garage, capsys):
        assert run(garage, "list") == 0
        out = capsys.readouterr().out
        assert "Vehicles: 2" in out
        assert "Civic" in out
        assert "cargo 0/5,000" in out

    def test_civic_drive_cycle(self, garage, capsys):
        assert run(garage, "accelerate", "c1") == 1
        assert "must power on first" in capsys.readouterr().out

        assert run(garage, "power-on", "c1") == 0
        assert run(garage, "accelerate", "c1", "--times", "2") == 0
        assert load_vehicle(garage, "c1").speed == 20

        assert run(garage, "power-off", "c1") == 0
        assert "Warning:" in capsys.readouterr().out
        assert load_vehicle(garage, "c1").powered_on is True

        assert run(garage, "brake", "c1", "--times", "5") == 0
        assert run(garage, "power-off", "c1") == 0
        civic = load_vehicle(garage, "c1")
        assert civic.speed == 0
        assert civic.powered_on is False

    def test_honk(self, garage, capsys):
        assert run(garage, "honk", "t1") == 0
        assert "Actros honked! FOOM!" in capsys.readouterr().out

    def test_cargo(self, garage, capsys):
        assert run(garage, "power-on", "t1") == 0
        assert run(garage, "load", "t1", "1200") == 0
        assert load_vehicle(garage, "t1").current_load == 1200

        assert run(garage, "load", "t1", "4000") == 1
        assert "Free space: 3800.00" in capsys.readouterr().out
        assert run(garage, "unload", "t1", "2000") == 1
        assert load_vehicle(garage, "t1").current_load == 1200

    def test_turbo(self, garage):
        assert run(garage, "add", "sports_car", "911", "silver", "--id", "s1") == 0
        assert run(garage, "turbo", "s1", "on") == 1
        assert run(garage, "power-on", "s1") == 0
        assert run(garage, "turbo", "s1", "on") == 0
        assert run(garage, "accelerate", "s1") == 0
        assert load_vehicle(garage, "s1").speed == 20

    def test_remove(self, garage):
        assert run(garage, "remove", "c1") == 0
        assert run(garage, "show", "c1") == 1


class TestMaintenanceCommands:
    """Tests for log / unlog / history / show."""

    def test_log_and_history(self, garage, capsys):
        assert run(
            garage, "log", "c1", "Oil change", "--date", "2025-01-15", "--cost", "250"
        ) == 0
        civic = load_vehicle(garage, "c1")
        assert len(civic.history) == 1
        assert civic.history[0].timestamp == datetime(2025, 1, 15, tzinfo=timezone.utc)

        assert run(garage, "history", "c1", "--past") == 0
        out = capsys.readouterr().out
        assert "Oil change" in out
        assert "$250.00" in out

    def test_log_scheduled(self, garage, capsys):
        assert run(garage, "log", "c1", "Inspection", "--in-months", "6") == 0
        civic = load_vehicle(garage, "c1")
        assert civic.next_service.service_type == "Inspection"

        capsys.readouterr()
        assert run(garage, "show", "c1") == 0
        assert "UPCOMING:" in capsys.readouterr().out

    def test_log_invalid(self, garage, capsys):
        assert run(garage, "log", "c1", " ", "--cost", "-5") == 1
        out = capsys.readouterr().out
        assert "Service type is required." in out
        assert "Cost must be a number greater than or equal to zero." in out
        assert load_vehicle(garage, "c1").history == []

    def test_log_dry_run(self, garage, capsys):
        assert run(garage, "log", "c1", "Oil change", "--dry-run") == 0
        assert "dry run" in capsys.readouterr().out
        assert load_vehicle(garage, "c1").history == []

    def test_unlog(self, garage):
        run(garage, "log", "c1", "Oil change", "--date", "2025-01-15")
        record_id = load_vehicle(garage, "c1").history[0].id
        assert run(garage, "unlog", "c1", record_id) == 0
        assert load_vehicle(garage, "c1").history == []
        assert run(garage, "unlog", "c1", record_id) == 1

    def test_history_empty(self, garage, capsys):
        assert run(garage, "history", "c1") == 0
        assert "No maintenance records found." in capsys.readouterr().out
