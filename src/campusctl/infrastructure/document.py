"""CampusDocument — the current graph version and its file on disk.

The document is the single dependency injected into every CLI-facing
service. It lazily loads the current :class:`CampusGraph` from the JSON
file named by the settings, and :meth:`commit` makes a new version
current: it stamps ``last_modified`` and writes the file atomically.

Last write wins; there is no locking or merge.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from campusctl.domain.models import CampusGraph, empty_graph
from campusctl.infrastructure.graph.engine import GraphEngine
from campusctl.infrastructure.persistence import load_file, save_file

if TYPE_CHECKING:
    from campusctl.config.settings import CampusSettings

logger = logging.getLogger(__name__)


class CampusDocument:
    """Repository for one campus document.

    Constructed lazily by the CLI context from :class:`CampusSettings`.
    Services receive it via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: CampusSettings) -> None:
        self._settings = settings
        self._graph: CampusGraph | None = None
        self._engine: GraphEngine | None = None

    @property
    def path(self) -> Path:
        """The document file."""
        return self._settings.document_path

    @property
    def settings(self) -> CampusSettings:
        return self._settings

    def exists(self) -> bool:
        return self.path.is_file()

    @property
    def graph(self) -> CampusGraph:
        """The current graph version, loaded on first access.

        A missing file reads as an empty graph.

        Raises:
            DocumentError: When the file exists but is not a valid document.
        """
        if self._graph is None:
            if self.exists():
                logger.debug("loading %s", self.path)
                self._graph = load_file(self.path)
            else:
                self._graph = empty_graph()
        return self._graph

    @property
    def engine(self) -> GraphEngine:
        """NetworkX projection of the current version (rebuilt after commit)."""
        if self._engine is None:
            self._engine = GraphEngine(self.graph)
        return self._engine

    def commit(self, graph: CampusGraph) -> CampusGraph:
        """Make *graph* the current version and write it to disk.

        Returns the stamped version that was written.
        """
        stamped = graph.replace(last_modified=datetime.now(UTC).isoformat())
        save_file(stamped, self.path, indent=self._settings.document.indent)
        self._graph = stamped
        self._engine = None
        logger.debug(
            "committed %s (%d nodes, %d edges)", self.path, len(stamped.nodes), len(stamped.edges)
        )
        return stamped
