# ============================================================================
# WORKFLOW INPUTS PARSER
# ============================================================================
# STATUS: Service - Describe the inputs a WDL document declares
# PURPOSE: Back the parseInputs endpoint with miniwdl
# CREATED: 03 MAR 2026
# ============================================================================
"""
Workflow Inputs Parser

Loads a staged WDL document with miniwdl (imports are resolved next to it on
local disk) and reports each input of the workflow as

    "<workflow>.<input>": "<type>"
    "<workflow>.<input>": "<type> (optional)"
    "<workflow>.<input>": "<type> (optional, default = <expr>)"

A document with no workflow but exactly one task reports that task's inputs.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, Union

import WDL

from core.errors import InvalidWorkflowSourceError

logger = logging.getLogger(__name__)

_LOAD_ERRORS = (
    WDL.Error.SyntaxError,
    WDL.Error.ImportError,
    WDL.Error.ValidationError,
    WDL.Error.MultipleValidationErrors,
)


def _load_document(source_path: Path) -> "WDL.Tree.Document":
    # miniwdl's loader needs an event loop; request threads don't have one
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return WDL.load(str(source_path))
    finally:
        asyncio.set_event_loop(None)
        loop.close()


def describe_input(decl: "WDL.Tree.Decl", required: bool) -> str:
    description = str(decl.type)
    if required:
        return description
    if decl.expr is not None:
        return f"{description} (optional, default = {decl.expr})"
    return f"{description} (optional)"


def parse_workflow_inputs(source_path: Union[str, Path]) -> Dict[str, str]:
    """
    Parse a local WDL document and describe its inputs.

    Raises:
        InvalidWorkflowSourceError: the document (or an import) does not
            parse or type-check, or declares no workflow.
    """
    path = Path(source_path)
    try:
        document = _load_document(path)
    except _LOAD_ERRORS as e:
        logger.info(f"Workflow source {path.name} failed to load: {e}")
        raise InvalidWorkflowSourceError(f"Invalid workflow source: {e}") from e

    if document.workflow is not None:
        target = document.workflow
    elif len(document.tasks) == 1:
        target = document.tasks[0]
    else:
        raise InvalidWorkflowSourceError(
            "Invalid workflow source: document declares no workflow"
        )

    required = {binding.name for binding in target.required_inputs}
    inputs = {
        f"{target.name}.{binding.name}": describe_input(binding.value, binding.name in required)
        for binding in target.available_inputs
    }
    logger.debug(f"Parsed {len(inputs)} inputs from {target.name}")
    return inputs


__all__ = ["parse_workflow_inputs", "describe_input"]
