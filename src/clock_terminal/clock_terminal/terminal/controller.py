from __future__ import annotations

from typing import Callable

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import GeoErrorCode
from ..core.exceptions import AuthenticationError, InvalidTransitionError, ValidationError


def register(app: Flask, container: Container) -> None:
    terminal = container.terminal

    def _state(status: int = 200, **extra):
        body = {"success": status < 400, **extra, "terminal": terminal.snapshot()}
        return jsonify(body), status

    def _run(action: Callable[[dict], dict | None]):
        data = request.get_json(silent=True) or {}
        try:
            extra = action(data) or {}
        except AuthenticationError as e:
            return _state(401, message=str(e))
        except ValidationError as e:
            return _state(400, message=str(e))
        except InvalidTransitionError as e:
            return _state(409, message=str(e))
        return _state(**extra)

    @app.route("/terminal", methods=["GET"], endpoint="terminal")
    def terminal_entry():
        """QR posters link here: /terminal?branch=315[&lat=..&lng=..]."""
        try:
            terminal.boot(
                branch=request.args.get("branch"),
                lat=request.args.get("lat"),
                lng=request.args.get("lng"),
            )
        except ValidationError as e:
            return _state(400, message=str(e))
        return _state(shops=[{"id": s.shop_id, "name": s.name} for s in container.shops.list_all()])

    @app.route("/terminal/branch", methods=["POST"], endpoint="terminal_branch")
    def select_branch():
        def action(data):
            shop = terminal.select_branch(str(data.get("branch") or ""), lat=data.get("lat"), lng=data.get("lng"))
            return {"message": f"Branch set to {shop.name}"}

        return _run(action)

    @app.route("/terminal/switch-branch", methods=["POST"], endpoint="terminal_switch_branch")
    def switch_branch():
        return _run(lambda data: terminal.switch_branch())

    @app.route("/terminal/login", methods=["POST"], endpoint="terminal_login")
    def login():
        def action(data):
            staff = terminal.authenticate(str(data.get("employee_id") or ""), str(data.get("pin") or ""))
            return {"message": f"Welcome {staff.name}"}

        return _run(action)

    @app.route("/terminal/logout", methods=["POST"], endpoint="terminal_logout")
    def logout():
        return _run(lambda data: terminal.end_session())

    @app.route("/terminal/location", methods=["POST"], endpoint="terminal_location")
    def report_location():
        """Browser geolocation callback: {lat, lng, accuracy} or {error: "timeout"}."""

        def action(data):
            if data.get("error"):
                try:
                    code = GeoErrorCode(data["error"])
                except ValueError:
                    code = GeoErrorCode.UNAVAILABLE
                terminal.report_position_error(code)
            else:
                terminal.report_position(data.get("lat"), data.get("lng"), data.get("accuracy"))
            return None

        return _run(action)

    @app.route("/terminal/location/retry", methods=["POST"], endpoint="terminal_location_retry")
    def retry_location():
        def action(data):
            result = terminal.retry_location()
            return {"in_range": result.in_range}

        return _run(action)

    @app.route("/terminal/shift", methods=["POST"], endpoint="terminal_shift")
    def select_shift():
        return _run(lambda data: {"shift": terminal.select_shift(str(data.get("shift") or ""))})

    @app.route("/terminal/clock-in", methods=["POST"], endpoint="terminal_clock_in")
    def clock_in():
        return _run(lambda data: {"message": terminal.clock_in().message})

    @app.route("/terminal/clock-out", methods=["POST"], endpoint="terminal_clock_out")
    def clock_out():
        return _run(lambda data: {"message": terminal.clock_out().message})

    @app.route("/terminal/dismiss", methods=["POST"], endpoint="terminal_dismiss")
    def dismiss():
        return _run(lambda data: terminal.dismiss())

    @app.route("/terminal/connectivity", methods=["POST"], endpoint="terminal_connectivity")
    def connectivity():
        """window 'online' / 'offline' events."""
        return _run(lambda data: {"changed": terminal.set_online(bool(data.get("online")))})

    @app.route("/terminal/sync", methods=["POST"], endpoint="terminal_sync")
    def sync():
        def action(data):
            report = terminal.sync()
            return {"synced": report.synced, "pending": report.pending}

        return _run(action)

    @app.route("/terminal/state", methods=["GET"], endpoint="terminal_state")
    def state():
        return _state()

    @app.route("/api/presence", methods=["GET"], endpoint="api_presence")
    def presence():
        """Live staff positions for the manager map."""
        container.presence_channel.sweep()
        return jsonify({"success": True, "staff": [e.to_dict() for e in container.presence_roster.entries()]})
