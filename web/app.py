"""Flask JSON API for the fleet garage."""

import logging
import os
from pathlib import Path

from flask import Flask, jsonify, request

from fleet import (
    CapacityExceededError,
    CargoHold,
    ConfigurationError,
    FleetError,
    InsufficientLoadError,
    InvalidStateError,
    MaintenanceRecord,
    NotFoundError,
    Outcome,
    ValidationError,
    VehicleKind,
    create_vehicle,
    delete_vehicle,
    flatten_record,
    flatten_vehicle,
    load_garage,
    load_vehicle,
    save_vehicle,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
app.config["GARAGE_FILE"] = os.environ.get(
    "GARAGE_FILE", str(Path(__file__).parent.parent / "garage.yaml")
)


def get_garage_path() -> Path:
    return Path(app.config["GARAGE_FILE"])


def error_status(error: FleetError) -> int:
    """Map a domain error to an HTTP status code."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, (InvalidStateError, CapacityExceededError, InsufficientLoadError)):
        return 409
    return 400


def error_response(error: FleetError):
    body = {"error": str(error)}
    if isinstance(error, ValidationError):
        body["errors"] = error.errors
    if isinstance(error, CapacityExceededError):
        body["freeSpace"] = error.free_space
    if isinstance(error, InsufficientLoadError):
        body["currentLoad"] = error.current_load
    return jsonify(body), error_status(error)


def outcome_response(outcome: Outcome, vehicle):
    """Persist if the outcome changed state, then describe it as JSON."""
    if outcome.error is not None:
        return error_response(outcome.error)
    if outcome.changed:
        save_vehicle(get_garage_path(), vehicle)
    return jsonify({
        "signal": outcome.signal.value,
        "message": outcome.message,
        "changed": outcome.changed,
        "vehicle": flatten_vehicle(vehicle),
    })


@app.errorhandler(FleetError)
def handle_fleet_error(error: FleetError):
    return error_response(error)


@app.errorhandler(FileNotFoundError)
def handle_missing_garage(error: FileNotFoundError):
    logger.error("Garage file missing: %s", error)
    return jsonify({"error": "Garage file not found"}), 500


# =============================================================================
# Vehicles
# =============================================================================


@app.route("/api/vehicles", methods=["GET"])
def list_vehicles():
    """All vehicles as flat records."""
    path = get_garage_path()
    if not path.exists():
        return jsonify([])
    return jsonify([flatten_vehicle(v) for v in load_garage(path)])


@app.route("/api/vehicles", methods=["POST"])
def add_vehicle():
    """Create a vehicle from {kind, model, color, cargoCapacity?, currentLoad?}."""
    data = request.get_json(silent=True) or {}
    kind = VehicleKind.from_tag(data.get("kind"))
    if kind is None:
        raise ConfigurationError(f"Unknown vehicle kind {data.get('kind')!r}")

    extras = None
    if kind is VehicleKind.TRUCK:
        extras = CargoHold(
            capacity=data.get("cargoCapacity", 5000),
            load=data.get("currentLoad", 0),
        )
    vehicle = create_vehicle(kind, data.get("model"), data.get("color"), extras=extras)
    save_vehicle(get_garage_path(), vehicle)
    return jsonify(flatten_vehicle(vehicle)), 201


@app.route("/api/vehicles/<vehicle_id>", methods=["GET"])
def get_vehicle(vehicle_id: str):
    return jsonify(flatten_vehicle(load_vehicle(get_garage_path(), vehicle_id)))


@app.route("/api/vehicles/<vehicle_id>", methods=["PUT"])
def update_vehicle(vehicle_id: str):
    """Change model and/or color."""
    vehicle = load_vehicle(get_garage_path(), vehicle_id)
    data = request.get_json(silent=True) or {}
    return outcome_response(
        vehicle.update_details(model=data.get("model"), color=data.get("color")), vehicle
    )


@app.route("/api/vehicles/<vehicle_id>", methods=["DELETE"])
def remove_vehicle(vehicle_id: str):
    delete_vehicle(get_garage_path(), vehicle_id)
    return jsonify({"message": f"Vehicle '{vehicle_id}' removed"})


ACTIONS = {
    "power-on": lambda v, data: v.power_on(),
    "power-off": lambda v, data: v.power_off(),
    "accelerate": lambda v, data: v.accelerate(),
    "brake": lambda v, data: v.brake(),
    "honk": lambda v, data: v.honk(),
    "turbo": lambda v, data: v.set_turbo(data.get("engaged", True)),
    "load": lambda v, data: v.load(data.get("quantity")),
    "unload": lambda v, data: v.unload(data.get("quantity")),
}


@app.route("/api/vehicles/<vehicle_id>/<action>", methods=["POST"])
def vehicle_action(vehicle_id: str, action: str):
    """Run one state command on a vehicle."""
    if action not in ACTIONS:
        return jsonify({"error": f"Unknown action '{action}'"}), 404
    vehicle = load_vehicle(get_garage_path(), vehicle_id)
    data = request.get_json(silent=True) or {}
    return outcome_response(ACTIONS[action](vehicle, data), vehicle)


# =============================================================================
# Maintenance
# =============================================================================


@app.route("/api/vehicles/<vehicle_id>/maintenance", methods=["GET"])
def list_maintenance(vehicle_id: str):
    """Past records (newest first) and upcoming ones (soonest first)."""
    vehicle = load_vehicle(get_garage_path(), vehicle_id)
    schedule = vehicle.classify()
    return jsonify({
        "past": [flatten_record(r) for r in schedule.past],
        "upcoming": [flatten_record(r) for r in schedule.upcoming],
    })


@app.route("/api/vehicles/<vehicle_id>/maintenance", methods=["POST"])
def add_maintenance(vehicle_id: str):
    """Add a record from {timestamp, serviceType, cost, description?}."""
    vehicle = load_vehicle(get_garage_path(), vehicle_id)
    data = request.get_json(silent=True) or {}
    record = MaintenanceRecord(
        data.get("timestamp"),
        data.get("serviceType"),
        data.get("cost"),
        data.get("description"),
    )
    outcome = vehicle.add_record(record)
    if outcome.error is not None:
        return error_response(outcome.error)
    save_vehicle(get_garage_path(), vehicle)
    return jsonify(flatten_record(record)), 201


@app.route("/api/vehicles/<vehicle_id>/maintenance/<record_id>", methods=["DELETE"])
def remove_maintenance(vehicle_id: str, record_id: str):
    vehicle = load_vehicle(get_garage_path(), vehicle_id)
    return outcome_response(vehicle.remove_record(record_id), vehicle)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
