"""Flask entry point exposing expansion, solve and utilization over HTTP."""
from datetime import date

from flask import Flask, jsonify, request

from tailplan.domain.contracts import OptimizerSettings
from tailplan.engine.interpreter import ResultInterpreter
from tailplan.errors import ConfigurationError
from tailplan.runner import PlanningRunner

app = Flask(__name__)
_runner = None


def get_runner() -> PlanningRunner:
    global _runner
    if _runner is None:
        _runner = PlanningRunner()
    return _runner


def _range_from(source) -> tuple:
    try:
        return date.fromisoformat(source["start"]), date.fromisoformat(source["end"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError("start and end must be ISO dates (YYYY-MM-DD)") from exc


@app.post("/api/expand")
def expand():
    start, end = _range_from(request.get_json(silent=True) or {})
    flights = get_runner().expand(start, end)
    return jsonify({"count": len(flights), "flights": [flight.to_dict() for flight in flights]})


@app.post("/api/solve")
def solve():
    body = request.get_json(silent=True) or {}
    start, end = _range_from(body)
    runner = get_runner()
    settings = None
    if "settings" in body:
        try:
            overrides = dict(body["settings"])
            overrides.setdefault("family_map", dict(runner.settings.family_map))
            settings = OptimizerSettings.from_dict(overrides)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid optimizer settings: {exc}") from exc

    instances = runner.expand(start, end)
    req = runner.build_request(instances, pins=body.get("pins"), settings=settings)
    result = runner.gateway.solve(req)
    view = ResultInterpreter(req).interpret(result)
    return jsonify(
        {
            "result": result.to_wire(),
            "summary": view.summary(),
            "byRegistration": view.flights_by_registration,
        }
    )


@app.get("/api/utilization")
def utilization():
    start, end = _range_from(request.args)
    rows = get_runner().utilization(start, end)
    return jsonify([row.to_dict() for row in rows])


@app.errorhandler(ConfigurationError)
def handle_configuration_error(exc):
    return jsonify({"error": str(exc)}), 400


@app.errorhandler(Exception)
def handle_error(exc):  # noqa: D401
    """Return JSON errors to the front-end."""
    return jsonify({"error": str(exc)}), 500


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
