"""Typed per-invocation context shared by the orchestrator and strategies.

A ``RelocationContext`` is created for one file, filled in as the decision
progresses and discarded afterwards. Nothing in it outlives a call, which
keeps the engine safe to run for many files at once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import MissingAssociation

if TYPE_CHECKING:
    from .config import RelocationSettings
    from .languages import Classification
    from .models import DestinationFolder, EpisodeInfo, GroupInfo, RelocationRequest, SeriesInfo

LOGGER = logging.getLogger(__name__)


class RelocationState(str, Enum):
    START = "start"
    TITLE_RESOLVED = "title_resolved"
    EPISODE_LABELED = "episode_labeled"
    CLASSIFIED = "classified"
    DESTINATION_CHOSEN = "destination_chosen"
    COMPOSED = "composed"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class DestinationDecision:
    """What a strategy decided about where the file goes.

    ``folder`` of ``None`` means the strategy has no opinion for this file
    and the host should defer to its next rule; ``reason`` says why.
    """

    folder: DestinationFolder | None = None
    subfolder: str | None = None
    backup_path: str | None = None
    reason: str | None = None

    @classmethod
    def defer(cls, reason: str) -> DestinationDecision:
        return cls(reason=reason)


@dataclass
class RelocationContext:
    request: RelocationRequest
    settings: RelocationSettings
    path_exists: Callable[[str], bool] | None = None
    state: RelocationState = RelocationState.START
    history: list[RelocationState] = field(default_factory=lambda: [RelocationState.START])
    series_title: str | None = None
    episode_title: str | None = None
    episode_label: str | None = None
    classification: Classification | None = None
    decision: DestinationDecision | None = None
    filename: str | None = None
    deferred: list[str] = field(default_factory=list)

    @property
    def series(self) -> SeriesInfo:
        if not self.request.series:
            raise MissingAssociation(f"No series is linked to {self.request.file.filename}")
        return self.request.series[0]

    @property
    def episode(self) -> EpisodeInfo:
        if not self.request.episodes:
            raise MissingAssociation(f"No episode is linked to {self.request.file.filename}")
        return self.request.episodes[0]

    @property
    def group(self) -> GroupInfo | None:
        return self.request.groups[0] if self.request.groups else None

    @property
    def is_film(self) -> bool:
        return self.series.is_standalone_film

    def advance(self, state: RelocationState) -> None:
        LOGGER.debug("%s: %s -> %s", self.request.file.filename, self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def as_log_fields(self) -> list[tuple[str, Any]]:
        decision = self.decision
        return [
            ("File", self.request.file.filename),
            ("State", self.state.value),
            ("Series title", self.series_title),
            ("Episode label", self.episode_label),
            ("Filename", self.filename),
            ("Destination", decision.folder.location if decision and decision.folder else None),
            ("Subfolder", decision.subfolder if decision else None),
            ("Deferred", self.deferred),
        ]
