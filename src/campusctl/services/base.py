"""BaseService — foundation for the CLI-facing campusctl services.

Every service receives a :class:`CampusDocument` at construction time.
The document holds the current graph version; services read it, run the
pure graph operations, and commit new versions through it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from campusctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from campusctl.infrastructure.document import CampusDocument
    from campusctl.infrastructure.persistence import DocumentError

logger = logging.getLogger(__name__)

DOCUMENT_ERROR = "DOCUMENT_ERROR"


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class EditorService(BaseService):
            def add_node(self, node) -> ServiceResult:
                graph = self._document.graph
                ...
    """

    def __init__(self, document: CampusDocument) -> None:
        self._document = document

    def _document_failure(self, op: str, exc: DocumentError) -> ServiceResult:
        """Failed result for a campus document that could not be read."""
        logger.debug("document error in %s: %s", op, exc)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=DOCUMENT_ERROR,
                message=str(exc),
                detail={"path": str(self._document.path)},
            ),
        )
