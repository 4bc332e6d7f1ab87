"""cert-manager webhook payloads — decode a ChallengePayload, run the solver, encode the answer."""

from __future__ import annotations

import logging

from active24_solver.exceptions import InvalidPayload, SolverError
from active24_solver.models import ChallengeRequest
from active24_solver.solver import SOLVER_NAME, Active24Solver

logger = logging.getLogger(__name__)

API_VERSION = "acme.cert-manager.io/v1alpha1"
PAYLOAD_KIND = "ChallengePayload"

_ACTIONS = {
    "Present": "present",
    "CleanUp": "clean_up",
}


def _response(uid: str, error: Exception | None = None) -> dict:
    response: dict = {"uid": uid, "success": error is None}
    if error is not None:
        response["status"] = {"status": "Failure", "message": str(error)}
    return {"apiVersion": API_VERSION, "kind": PAYLOAD_KIND, "response": response}


def handle_payload(solver: Active24Solver, payload: dict) -> dict:
    """Run the action requested by a ChallengePayload and return the response payload.

    Solver errors are reported as a failed response so cert-manager retries the
    challenge; a payload without a request is rejected with InvalidPayload.
    """
    raw_request = payload.get("request")
    if not isinstance(raw_request, dict):
        raise InvalidPayload("ChallengePayload has no request")
    try:
        request = ChallengeRequest.from_dict(raw_request)
    except KeyError as exc:
        return _response(raw_request.get("uid", ""), ValueError(f"ChallengeRequest is missing {exc.args[0]}"))

    method = _ACTIONS.get(request.action)
    if method is None:
        return _response(request.uid, ValueError(f"Unsupported challenge action: '{request.action}'"))

    try:
        getattr(solver, method)(request)
    except SolverError as exc:
        logger.error("%s for %s failed: %s", request.action, request.resolved_fqdn, exc)
        return _response(request.uid, exc)
    return _response(request.uid)


def api_resource_list(group_name: str) -> dict:
    """Discovery document announcing the solver resource under ``group_name``."""
    return {
        "kind": "APIResourceList",
        "apiVersion": "v1",
        "groupVersion": f"{group_name}/v1alpha1",
        "resources": [
            {
                "name": SOLVER_NAME,
                "singularName": SOLVER_NAME,
                "namespaced": False,
                "kind": PAYLOAD_KIND,
                "verbs": ["create"],
            }
        ],
    }
