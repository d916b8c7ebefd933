#!/usr/bin/env python3
"""Tests for the per-kind behavior table."""

import pytest

from fleet import CargoHold, Turbo, Vehicle, VehicleKind, behavior_for, create_vehicle
from fleet.behaviors import (
    BEHAVIORS,
    TRUCK_MIN_LOAD_FACTOR,
    truck_brake_factor,
    truck_load_factor,
)


class TestBehaviorTable:
    """Tests for behavior_for and the table entries."""

    def test_every_kind_has_behavior(self):
        for kind in VehicleKind:
            assert behavior_for(kind).kind is kind
        assert set(BEHAVIORS) == set(VehicleKind)

    def test_alert_messages(self):
        assert behavior_for(VehicleKind.CAR).alert_message("Civic") == "Civic honked!"
        assert behavior_for(VehicleKind.SPORTS_CAR).alert_message("911") == "911 honked!"
        assert behavior_for(VehicleKind.TRUCK).alert_message("Actros") == "Actros honked! FOOM!"
        assert (
            behavior_for(VehicleKind.MOTORCYCLE).alert_message("Ducati")
            == "Ducati honked! Beep beep!"
        )
        assert (
            behavior_for(VehicleKind.BICYCLE).alert_message("Brompton")
            == "Brompton rang the bell! Ring ring!"
        )

    def test_only_bicycle_needs_no_power(self):
        assert behavior_for(VehicleKind.BICYCLE).needs_power is False
        assert behavior_for(VehicleKind.CAR).needs_power is True

    def test_sports_car_and_truck_share_car_braking_power_rule(self):
        car = behavior_for(VehicleKind.CAR)
        sports = behavior_for(VehicleKind.SPORTS_CAR)
        assert sports.brake_delta is car.brake_delta
        assert sports.alert == car.alert
        assert behavior_for(VehicleKind.TRUCK).needs_power == car.needs_power

    @pytest.mark.parametrize(
        "kind, accel, brake",
        [
            (VehicleKind.BICYCLE, 5, 5),
            (VehicleKind.CAR, 10, 10),
            (VehicleKind.MOTORCYCLE, 18, 15),
        ],
    )
    def test_fixed_deltas(self, kind, accel, brake):
        vehicle = create_vehicle(kind, "Model", "red")
        behavior = behavior_for(kind)
        assert behavior.accelerate_delta(vehicle) == accel
        assert behavior.brake_delta(vehicle) == brake


class TestSportsCarAcceleration:
    """Turbo doubles sports car acceleration."""

    def test_without_turbo(self):
        vehicle = create_vehicle("sports_car", "911", "silver")
        assert behavior_for(VehicleKind.SPORTS_CAR).accelerate_delta(vehicle) == 10

    def test_with_turbo(self):
        vehicle = Vehicle(
            "sports_car", "911", "silver", extras=Turbo(engaged=True), powered_on=True
        )
        assert behavior_for(VehicleKind.SPORTS_CAR).accelerate_delta(vehicle) == 20


class TestTruckFactors:
    """Tests for load-dependent truck acceleration and braking."""

    def test_empty_truck(self):
        cargo = CargoHold(capacity=5000, load=0)
        assert truck_load_factor(cargo) == 1
        assert truck_brake_factor(cargo) == 1

    def test_partial_load(self):
        cargo = CargoHold(capacity=5000, load=1200)
        assert truck_load_factor(cargo) == pytest.approx(0.84)
        assert truck_brake_factor(cargo) == pytest.approx(1.12)

    def test_load_factor_floor(self):
        cargo = CargoHold(capacity=100, load=1000)
        assert truck_load_factor(cargo) == TRUCK_MIN_LOAD_FACTOR

    def test_zero_capacity(self):
        cargo = CargoHold(capacity=0, load=0)
        assert truck_load_factor(cargo) == 1
        assert truck_brake_factor(cargo) == 1

    def test_truck_deltas(self):
        vehicle = create_vehicle(
            "truck", "Actros", "white", extras=CargoHold(capacity=5000, load=1200)
        )
        behavior = behavior_for(VehicleKind.TRUCK)
        assert behavior.accelerate_delta(vehicle) == pytest.approx(8 * 0.84)
        assert behavior.brake_delta(vehicle) == pytest.approx(12 / 1.12)
