# ============================================================================
# WORKFLOW SERVICE
# ============================================================================
# STATUS: Core - Workspace-scoped workflow submission and reads
# PURPOSE: Assemble submission bundles and mediate access to engine state
# CREATED: 03 MAR 2026
# ============================================================================
"""
Workflow Service

Orchestrates everything a workspace-scoped workflow call needs:

Submission:
    1. Fail fast on caller input (source present, jes_gcs_root present)
    2. Require WRITER on the workspace
    3. Resolve project, caller email, compute identity, key material
    4. Build the bundle in scoped temp resources (inputs, options, labels,
       source, dependency archive), injecting reserved presets just before
       serialization
    5. Forward to the engine; every temp resource is deleted on the way out

Reads (status, labels, metadata) are preceded by the access + label check.
Queries are forced onto the caller's workspace label.

External client errors are translated into the core.errors taxonomy here,
at the boundary; routes only ever see GatewayError subclasses.
"""

import json
import logging
from contextlib import ExitStack
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.contracts import WorkflowLabelKeys
from core.errors import (
    CallerInputError,
    DependencyResolutionError,
    EngineError,
    UpstreamServiceError,
)
from core.logging import log_checkpoint, log_context
from core.models import (
    QueryFilters,
    StorageLocator,
    WorkflowIdAndLabels,
    WorkflowIdAndStatus,
    WorkflowMetadataResponse,
    WorkflowQueryResponse,
)
from infrastructure.storage import BlobRepository, BlobStorageError
from infrastructure.tempfiles import TempKind, acquire
from services.access_validator import AccessValidator
from services.cromwell_client import CromwellApiError, CromwellClient
from services.dependency_resolver import archive_dependencies, download_dependencies_if_exist
from services.inputs_parser import parse_workflow_inputs
from services.presets import (
    PresetContext,
    inject_label_presets,
    inject_option_presets,
    validate_required_options,
)
from services.sam_client import SamApiError, SamClient
from services.workspace_client import WorkspaceApiError, WorkspaceClient

logger = logging.getLogger(__name__)


def _parse_locator(uri: str, field: str) -> StorageLocator:
    try:
        return StorageLocator.from_uri(uri)
    except ValueError as e:
        raise CallerInputError(f"Invalid {field}: {e}") from e


def _engine_error(action: str, error: CromwellApiError) -> EngineError:
    if error.status_code:
        message = f"Error {action}: Cromwell returned {error.status_code}: {error.body}"
    else:
        message = f"Error {action}: {error}"
    return EngineError(message, engine_status=error.status_code, engine_body=error.body)


def _format_time(value: Optional[datetime]) -> Optional[str]:
    # the engine requires an offset; naive values are taken as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class WorkflowService:
    """Workspace-scoped workflow operations against the execution engine."""

    def __init__(
        self,
        cromwell_client: CromwellClient,
        workspace_client: WorkspaceClient,
        sam_client: SamClient,
        storage: Optional[BlobRepository],
        default_docker_image: str,
        temp_dir: Optional[str] = None,
        access_validator: Optional[AccessValidator] = None,
    ):
        self._cromwell = cromwell_client
        self._workspace = workspace_client
        self._sam = sam_client
        self._storage = storage
        self._default_docker_image = default_docker_image
        self._temp_dir = temp_dir
        self._validator = access_validator or AccessValidator(workspace_client, cromwell_client)

    @property
    def access_validator(self) -> AccessValidator:
        return self._validator

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _require_storage(self) -> BlobRepository:
        if self._storage is None:
            raise DependencyResolutionError("Object storage is not configured")
        return self._storage

    def _download(self, locator: StorageLocator, local_path: Path) -> None:
        try:
            self._require_storage().download_to_file(
                locator.container, locator.blob_path, local_path
            )
        except BlobStorageError as e:
            raise DependencyResolutionError(f"Error reading {locator.uri}: {e}") from e

    def _resolve_preset_context(
        self,
        workspace_id: str,
        token: str,
        source_uri: Optional[str],
    ) -> PresetContext:
        try:
            project_id = self._workspace.get_project_id(workspace_id, token)
        except WorkspaceApiError as e:
            raise UpstreamServiceError(f"Error reading workspace {workspace_id}: {e}") from e

        try:
            user_email = self._sam.get_user_email(token)
            compute_account = self._sam.get_pet_service_account(project_id, token)
            key_json = self._sam.get_pet_service_account_key(project_id, user_email)
        except SamApiError as e:
            raise UpstreamServiceError(f"Error resolving caller identity: {e}") from e

        return PresetContext(
            workspace_id=workspace_id,
            user_email=user_email,
            project_id=project_id,
            service_account_json=key_json,
            compute_service_account=compute_account,
            default_docker_image=self._default_docker_image,
            source_uri=source_uri,
        )

    # ========================================================================
    # SUBMISSION
    # ========================================================================

    def submit_workflow(
        self,
        workspace_id: Any,
        source_uri: Optional[str],
        source_url: Optional[str],
        inputs: Optional[Dict[str, Any]],
        options: Optional[Dict[str, Any]],
        labels: Optional[Dict[str, str]],
        workflow_type: Optional[str],
        workflow_type_version: Optional[str],
        requested_workflow_id: Optional[Any],
        token: str,
        *,
        workflow_on_hold: bool = False,
        dependencies_uri: Optional[str] = None,
    ) -> WorkflowIdAndStatus:
        """
        Submit a workflow into a workspace.

        Raises:
            CallerInputError: no source given, jes_gcs_root missing, bad URI
            AuthorizationError: caller lacks WRITER on the workspace
            UpstreamServiceError: workspace or identity service failed
            DependencyResolutionError: object storage failed
            EngineError: the engine rejected the submission
        """
        workspace_id = str(workspace_id)

        if not source_uri and not source_url:
            raise CallerInputError("Either source_uri or source_url must be provided")
        validate_required_options(options)
        source_locator = _parse_locator(source_uri, "source_uri") if source_uri else None
        dependencies_locator = (
            _parse_locator(dependencies_uri, "dependencies_uri") if dependencies_uri else None
        )

        with log_context(workspace_id=workspace_id, operation="submit_workflow"):
            self._validator.check_workspace_write_access(workspace_id, token)
            context = self._resolve_preset_context(workspace_id, token, source_uri)

            with ExitStack() as stack:
                def temp(kind: TempKind, prefix: str):
                    return stack.enter_context(acquire(kind, prefix, dir=self._temp_dir))

                inputs_path = None
                if inputs is not None:
                    inputs_file = temp(TempKind.FILE, "workflow-inputs-")
                    inputs_path = inputs_file.write_text(json.dumps(inputs))

                final_options = inject_option_presets(options, context)
                final_labels = inject_label_presets(labels, context)
                options_path = temp(TempKind.FILE, "workflow-options-").write_text(
                    json.dumps(final_options)
                )
                labels_path = temp(TempKind.FILE, "workflow-labels-").write_text(
                    json.dumps(final_labels)
                )

                source_path = None
                dependencies_path = None
                if source_locator is not None:
                    source_path = temp(TempKind.FILE, "workflow-source-").path
                    self._download(source_locator, source_path)

                if dependencies_locator is not None:
                    dependencies_path = temp(TempKind.FILE, "workflow-dependencies-").path
                    self._download(dependencies_locator, dependencies_path)
                elif source_locator is not None:
                    staging = temp(TempKind.DIRECTORY, "workflow-dependencies-")
                    found = download_dependencies_if_exist(
                        self._require_storage(), source_path, source_locator, staging.path
                    )
                    if found:
                        archive = temp(TempKind.FILE, "workflow-dependencies-zip-")
                        dependencies_path = archive_dependencies(staging.path, archive.path)

                log_checkpoint(
                    "bundle_assembled",
                    {
                        "has_source_file": source_path is not None,
                        "has_inputs": inputs_path is not None,
                        "has_dependencies": dependencies_path is not None,
                    },
                    logger=logger,
                )

                try:
                    response = self._cromwell.submit(
                        workflow_source=source_path,
                        workflow_url=None if source_path is not None else source_url,
                        workflow_on_hold=workflow_on_hold,
                        workflow_inputs=inputs_path,
                        workflow_options=options_path,
                        workflow_type=workflow_type,
                        workflow_type_version=workflow_type_version,
                        labels=labels_path,
                        workflow_dependencies=dependencies_path,
                        requested_workflow_id=(
                            str(requested_workflow_id) if requested_workflow_id else None
                        ),
                    )
                except CromwellApiError as e:
                    raise _engine_error("submitting workflow", e) from e

            result = WorkflowIdAndStatus.from_engine(response)
            log_checkpoint(
                "submission_forwarded",
                {"workflow_id": str(result.id), "status": result.status},
                logger=logger,
            )
            return result

    # ========================================================================
    # READS
    # ========================================================================

    def get_status(self, workspace_id: Any, workflow_id: Any, token: str) -> WorkflowIdAndStatus:
        with log_context(workspace_id=str(workspace_id), workflow_id=str(workflow_id)):
            self._validator.validate_access_and_label(workflow_id, workspace_id, token)
            try:
                payload = self._cromwell.status(str(workflow_id))
            except CromwellApiError as e:
                raise _engine_error("getting workflow status", e) from e
            return WorkflowIdAndStatus.from_engine(payload)

    def get_labels(self, workspace_id: Any, workflow_id: Any, token: str) -> WorkflowIdAndLabels:
        with log_context(workspace_id=str(workspace_id), workflow_id=str(workflow_id)):
            self._validator.validate_access_and_label(workflow_id, workspace_id, token)
            try:
                payload = self._cromwell.labels(str(workflow_id))
            except CromwellApiError as e:
                raise _engine_error("getting workflow labels", e) from e
            return WorkflowIdAndLabels.from_engine(payload)

    def get_metadata(
        self,
        workspace_id: Any,
        workflow_id: Any,
        token: str,
        include_keys: Optional[List[str]] = None,
        exclude_keys: Optional[List[str]] = None,
        expand_sub_workflows: Optional[bool] = None,
    ) -> WorkflowMetadataResponse:
        with log_context(workspace_id=str(workspace_id), workflow_id=str(workflow_id)):
            self._validator.validate_access_and_label(workflow_id, workspace_id, token)
            try:
                payload = self._cromwell.metadata(
                    str(workflow_id),
                    include_keys=include_keys,
                    exclude_keys=exclude_keys,
                    expand_sub_workflows=expand_sub_workflows,
                )
            except CromwellApiError as e:
                raise _engine_error("getting workflow metadata", e) from e
            return WorkflowMetadataResponse.from_engine(payload)

    def query_workflows(
        self,
        workspace_id: Any,
        token: str,
        filters: Optional[QueryFilters] = None,
    ) -> WorkflowQueryResponse:
        """Query workflows, always restricted to those labelled with workspace_id."""
        workspace_id = str(workspace_id)
        filters = filters or QueryFilters()

        with log_context(workspace_id=workspace_id, operation="query_workflows"):
            self._validator.check_workspace_access(workspace_id, token)

            params: Dict[str, Any] = {
                "submission": _format_time(filters.submission),
                "start": _format_time(filters.start),
                "end": _format_time(filters.end),
                "status": filters.status,
                "name": filters.name,
                "id": filters.id,
                "additionalQueryResultFields": filters.additional_query_result_fields,
                "includeSubworkflows": (
                    None if filters.include_subworkflows is None
                    else str(filters.include_subworkflows).lower()
                ),
            }
            params = {key: value for key, value in params.items() if value is not None}
            params["label"] = f"{WorkflowLabelKeys.WORKSPACE_ID.value}:{workspace_id}"

            try:
                payload = self._cromwell.query(params)
            except CromwellApiError as e:
                raise _engine_error("querying workflows", e) from e
            return WorkflowQueryResponse.from_engine(payload)

    # ========================================================================
    # INPUT DISCOVERY
    # ========================================================================

    def parse_inputs(self, workspace_id: Any, source_uri: str, token: str) -> Dict[str, str]:
        """
        Describe the inputs of the WDL document at source_uri.

        Raises:
            CallerInputError: bad URI
            InvalidWorkflowSourceError: the document does not parse
            DependencyResolutionError: object storage failed
        """
        workspace_id = str(workspace_id)
        if not source_uri:
            raise CallerInputError("uri must be provided")
        locator = _parse_locator(source_uri, "uri")

        with log_context(workspace_id=workspace_id, operation="parse_inputs"):
            self._validator.check_workspace_access(workspace_id, token)

            with acquire(TempKind.DIRECTORY, "workflow-parse-", dir=self._temp_dir) as staging:
                source_path = staging.path / locator.name
                self._download(locator, source_path)
                download_dependencies_if_exist(
                    self._require_storage(), source_path, locator, staging.path
                )
                return parse_workflow_inputs(source_path)


__all__ = ["WorkflowService"]
