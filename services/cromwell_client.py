# ============================================================================
# EXECUTION ENGINE HTTP CLIENT
# ============================================================================
# STATUS: Service - Sync HTTP client for the Cromwell REST API
# PURPOSE: Submit workflows and read engine state
# CREATED: 03 MAR 2026
# ============================================================================
"""
Execution Engine HTTP Client

Thin wrapper over the Cromwell workflows API (/api/workflows/v1). Returns
the engine's JSON as dicts; translation to caller-facing models happens in
the workflow service. Every failure raises CromwellApiError.
"""

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from services.base_client import ApiError, BaseApiClient

logger = logging.getLogger(__name__)

API_VERSION = "v1"

PathLike = Union[str, Path]


class CromwellApiError(ApiError):
    """The execution engine rejected or failed a call."""


class CromwellClient(BaseApiClient):
    """Sync HTTP client for the execution engine."""

    error_cls = CromwellApiError
    service_label = "Cromwell"

    def __init__(self, base_url: str, timeout: Optional[httpx.Timeout] = None):
        super().__init__(base_url, timeout)
        self._workflows_path = f"/api/workflows/{API_VERSION}"

    # ------------------------------------------------------------------
    # SUBMIT
    # ------------------------------------------------------------------

    def submit(
        self,
        workflow_source: Optional[PathLike] = None,
        workflow_url: Optional[str] = None,
        workflow_on_hold: bool = False,
        workflow_inputs: Optional[PathLike] = None,
        workflow_options: Optional[PathLike] = None,
        workflow_type: Optional[str] = None,
        workflow_type_version: Optional[str] = None,
        labels: Optional[PathLike] = None,
        workflow_dependencies: Optional[PathLike] = None,
        requested_workflow_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        POST /api/workflows/v1 (multipart/form-data)

        File arguments are local paths; each is sent as a form file part.
        Returns {"id": ..., "status": ...}.
        """
        form: Dict[str, str] = {"workflowOnHold": "true" if workflow_on_hold else "false"}
        if workflow_url is not None:
            form["workflowUrl"] = workflow_url
        if workflow_type is not None:
            form["workflowType"] = workflow_type
        if workflow_type_version is not None:
            form["workflowTypeVersion"] = workflow_type_version
        if requested_workflow_id is not None:
            form["requestedWorkflowId"] = requested_workflow_id

        file_parts: List[Tuple[str, Optional[PathLike]]] = [
            ("workflowSource", workflow_source),
            ("workflowInputs", workflow_inputs),
            ("workflowOptions", workflow_options),
            ("labels", labels),
            ("workflowDependencies", workflow_dependencies),
        ]

        with ExitStack() as stack:
            files = {
                part: (Path(path).name, stack.enter_context(open(path, "rb")))
                for part, path in file_parts
                if path is not None
            }
            logger.info(f"Submitting workflow to engine (parts: {sorted(files)})")
            return self._request("POST", self._workflows_path, data=form, files=files or None)

    # ------------------------------------------------------------------
    # READS
    # ------------------------------------------------------------------

    def status(self, workflow_id: str) -> Dict[str, Any]:
        """GET /api/workflows/v1/{id}/status"""
        return self._request("GET", f"{self._workflows_path}/{workflow_id}/status")

    def labels(self, workflow_id: str) -> Dict[str, Any]:
        """GET /api/workflows/v1/{id}/labels"""
        return self._request("GET", f"{self._workflows_path}/{workflow_id}/labels")

    def metadata(
        self,
        workflow_id: str,
        include_keys: Optional[List[str]] = None,
        exclude_keys: Optional[List[str]] = None,
        expand_sub_workflows: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """GET /api/workflows/v1/{id}/metadata"""
        params: Dict[str, Any] = {}
        if include_keys:
            params["includeKey"] = include_keys
        if exclude_keys:
            params["excludeKey"] = exclude_keys
        if expand_sub_workflows is not None:
            params["expandSubWorkflows"] = "true" if expand_sub_workflows else "false"
        return self._request(
            "GET", f"{self._workflows_path}/{workflow_id}/metadata", params=params or None
        )

    def query(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        GET /api/workflows/v1/query

        params maps engine query parameter names (status, label, ...) to a
        value or list of values.
        """
        return self._request("GET", f"{self._workflows_path}/query", params=params)


__all__ = ["CromwellClient", "CromwellApiError"]
