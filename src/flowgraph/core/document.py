"""
Pipeline document loading and saving.

Documents are the editor's JSON export: ``{"nodes": [...], "edges": [...],
"groups": [...]}``. Legacy single-group node records are migrated to the
list form while the document is validated, so nothing downstream needs to
know about ``groupId``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from .exceptions import DocumentLoadError
from .types import PipelineDocument

logger = logging.getLogger(__name__)


def parse_document(data: Dict[str, Any], source: str = "<memory>") -> PipelineDocument:
    """Validate a decoded document."""
    if not isinstance(data, dict):
        raise DocumentLoadError(source, "top-level JSON value must be an object")
    try:
        document = PipelineDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentLoadError(source, str(e)) from e

    logger.debug(
        f"Loaded {len(document.nodes)} nodes, {len(document.edges)} edges, "
        f"{len(document.groups)} groups from {source}"
    )
    return document


def load_document(path: Union[str, Path]) -> PipelineDocument:
    """Read and validate a pipeline JSON file."""
    doc_path = Path(path)
    if not doc_path.exists():
        raise DocumentLoadError(str(doc_path), "file not found")
    try:
        data = json.loads(doc_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise DocumentLoadError(str(doc_path), str(e)) from e
    return parse_document(data, str(doc_path))


def dump_document(document: PipelineDocument) -> Dict[str, Any]:
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def save_document(document: PipelineDocument, path: Union[str, Path], indent: int = 2) -> None:
    doc_path = Path(path)
    doc_path.parent.mkdir(parents=True, exist_ok=True)
    doc_path.write_text(json.dumps(dump_document(document), indent=indent))
