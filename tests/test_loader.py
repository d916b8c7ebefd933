#!/usr/bin/env python3
"""Tests for YAML garage loading and saving utilities."""

import pytest
import yaml

from fleet import (
    CargoHold,
    ConfigurationError,
    MaintenanceRecord,
    NotFoundError,
    Vehicle,
    VehicleKind,
    create_garage,
    create_vehicle,
    delete_vehicle,
    list_maintenance,
    load_garage,
    load_vehicle,
    save_vehicle,
)

GARAGE_YAML = """
vehicles:
  - id: car_civic_1
    kind: car
    model: Civic
    color: red
    poweredOn: true
    speed: 20
    maintenanceHistory:
      - id: maint_2
        timestamp: '2025-03-01T09:00:00.000Z'
        serviceType: Tires
        cost: 400
        description: ''
      - id: maint_1
        timestamp: '2025-01-15T10:00:00.000Z'
        serviceType: Oil change
        cost: 250
        description: Synthetic
  - id: truck_actros_1
    kind: truck
    model: Actros
    color: white
    poweredOn: false
    speed: 0
    cargoCapacity: 5000
    currentLoad: 1200
    maintenanceHistory: []
"""


@pytest.fixture
def garage_file(tmp_path):
    path = tmp_path / "garage.yaml"
    path.write_text(GARAGE_YAML)
    return path


# =============================================================================
# Loading
# =============================================================================


class TestLoadGarage:
    """Tests for load_garage."""

    def test_loads_all_vehicles(self, garage_file):
        vehicles = load_garage(garage_file)
        assert len(vehicles) == 2
        assert all(isinstance(v, Vehicle) for v in vehicles)
        civic, truck = vehicles
        assert civic.kind is VehicleKind.CAR
        assert civic.speed == 20
        assert len(civic.history) == 2
        assert truck.cargo == CargoHold(capacity=5000, load=1200)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_garage(path) == []

    def test_create_garage(self, tmp_path):
        path = tmp_path / "new.yaml"
        create_garage(path)
        assert yaml.safe_load(path.read_text()) == {"vehicles": []}
        assert load_garage(path) == []

    def test_skips_broken_vehicle(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("""
vehicles:
  - id: bad
    kind: car
    color: red
  - id: good
    kind: car
    model: Civic
    color: red
""")
        vehicles = load_garage(path)
        assert [v.id for v in vehicles] == ["good"]

    def test_malformed_maintenance_keeps_vehicle(self, tmp_path):
        path = tmp_path / "messy.yaml"
        path.write_text("""
vehicles:
  - id: car_1
    kind: car
    model: Civic
    color: red
    poweredOn: 'false'
    maintenanceHistory:
      - id: m1
        timestamp: '2025-01-15T10:00:00.000Z'
        serviceType: 123
        cost: 10
      - id: m2
        timestamp: '2025-01-15T10:00:00.000Z'
        serviceType: Oil change
        cost: 10
        description: 7
  - id: car_2
    kind: car
    model: Accord
    color: blue
""")
        vehicles = load_garage(path)
        assert [v.id for v in vehicles] == ["car_1", "car_2"]
        assert vehicles[0].powered_on is False
        assert [r.id for r in vehicles[0].history] == ["m2"]

    def test_strict_raises_on_unknown_kind(self, tmp_path):
        path = tmp_path / "odd.yaml"
        path.write_text("""
vehicles:
  - id: hover_1
    kind: hovercraft
    model: Zoom
    color: blue
""")
        assert load_garage(path)[0].kind is VehicleKind.CAR
        with pytest.raises(ConfigurationError):
            load_garage(path, strict=True)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_garage(tmp_path / "nope.yaml")


class TestLoadVehicle:
    """Tests for load_vehicle."""

    def test_loads_by_id(self, garage_file):
        truck = load_vehicle(garage_file, "truck_actros_1")
        assert truck.model == "Actros"

    def test_missing_id(self, garage_file):
        with pytest.raises(NotFoundError, match="nope"):
            load_vehicle(garage_file, "nope")


# =============================================================================
# Saving
# =============================================================================


class TestSaveVehicle:
    """Tests for save_vehicle."""

    def test_updates_existing(self, garage_file):
        civic = load_vehicle(garage_file, "car_civic_1")
        civic.brake()
        save_vehicle(garage_file, civic)

        data = yaml.safe_load(garage_file.read_text())
        assert len(data["vehicles"]) == 2
        assert data["vehicles"][0]["speed"] == 10
        assert data["vehicles"][1]["id"] == "truck_actros_1"

    def test_appends_new(self, garage_file):
        bike = create_vehicle("bicycle", "Brompton", "green", vehicle_id="bike_1")
        save_vehicle(garage_file, bike)

        vehicles = load_garage(garage_file)
        assert [v.id for v in vehicles] == ["car_civic_1", "truck_actros_1", "bike_1"]

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "fresh.yaml"
        save_vehicle(path, create_vehicle("car", "Civic", "red", vehicle_id="c1"))
        assert [v.id for v in load_garage(path)] == ["c1"]

    def test_saves_maintenance(self, garage_file):
        truck = load_vehicle(garage_file, "truck_actros_1")
        truck.add_record(MaintenanceRecord("2025-05-01", "Brake pads", 900, record_id="m9"))
        save_vehicle(garage_file, truck)

        reloaded = load_vehicle(garage_file, "truck_actros_1")
        assert [r.id for r in reloaded.history] == ["m9"]
        assert reloaded.history[0].cost == 900

    def test_file_is_stable(self, garage_file):
        """Saving an unchanged vehicle twice yields identical files."""
        civic = load_vehicle(garage_file, "car_civic_1")
        save_vehicle(garage_file, civic)
        first = garage_file.read_text()
        save_vehicle(garage_file, load_vehicle(garage_file, "car_civic_1"))
        assert garage_file.read_text() == first


class TestDeleteVehicle:
    """Tests for delete_vehicle."""

    def test_deletes(self, garage_file):
        delete_vehicle(garage_file, "car_civic_1")
        assert [v.id for v in load_garage(garage_file)] == ["truck_actros_1"]

    def test_missing_id(self, garage_file):
        with pytest.raises(NotFoundError):
            delete_vehicle(garage_file, "nope")


class TestListMaintenance:
    """Tests for list_maintenance."""

    def test_oldest_first_by_default(self, garage_file):
        records = list_maintenance(garage_file, "car_civic_1")
        assert [r.id for r in records] == ["maint_1", "maint_2"]

    def test_reverse(self, garage_file):
        records = list_maintenance(garage_file, "car_civic_1", reverse=True)
        assert [r.id for r in records] == ["maint_2", "maint_1"]
