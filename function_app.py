"""Azure Functions entry point — cert-manager webhook HTTP triggers."""

import json
import logging

import azure.functions as func

from active24_solver.config import AppConfig, configure_logging, load_config
from active24_solver.exceptions import InvalidPayload
from active24_solver.solver import SOLVER_NAME, Active24Solver
from active24_solver.webhook import api_resource_list, handle_payload

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

_config: AppConfig | None = None
_solver: Active24Solver | None = None


def _get_config() -> AppConfig:
    """Return the cached process configuration."""
    global _config
    if _config is None:
        _config = load_config()
        configure_logging(_config)
    return _config


def _get_solver() -> Active24Solver:
    """Return the process-wide solver, initializing it on first use."""
    global _solver
    if _solver is None:
        solver = Active24Solver()
        solver.initialize(_get_config())
        _solver = solver
    return _solver


def _json_response(body: dict, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(json.dumps(body), status_code=status_code, mimetype="application/json")


def _not_found(req: func.HttpRequest) -> func.HttpResponse:
    logging.warning("No webhook resource at %s", req.url)
    return func.HttpResponse("Not found", status_code=404)


# API discovery: lets the aggregation layer list the solver resource
@app.route(route="apis/{group}/v1alpha1", methods=["GET"])
def discovery(req: func.HttpRequest) -> func.HttpResponse:
    group = req.route_params.get("group")
    if group != _get_config().group_name:
        return _not_found(req)
    return _json_response(api_resource_list(group))


# Challenge: Present or CleanUp a DNS-01 TXT record
@app.route(route="apis/{group}/v1alpha1/{solver}", methods=["POST"])
def challenge(req: func.HttpRequest) -> func.HttpResponse:
    if req.route_params.get("group") != _get_config().group_name or req.route_params.get("solver") != SOLVER_NAME:
        return _not_found(req)

    try:
        payload = req.get_json()
    except ValueError:
        return func.HttpResponse("Request body must be a JSON ChallengePayload", status_code=400)
    if not isinstance(payload, dict):
        return func.HttpResponse("Request body must be a JSON ChallengePayload", status_code=400)

    try:
        response = handle_payload(_get_solver(), payload)
    except InvalidPayload as exc:
        return func.HttpResponse(str(exc), status_code=400)
    return _json_response(response)
