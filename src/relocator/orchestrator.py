"""Relocation orchestration for a single media file.

``relocate`` walks one file through the decision states::

    start -> title_resolved -> episode_labeled -> classified
          -> destination_chosen -> composed -> done

and lands in ``failed`` as soon as an input is missing or a component
reports a problem. Component errors arrive as ``RelocationError``
exceptions and leave this module only as ``RelocationFailure`` values.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .config import RelocationSettings
from .contexts import RelocationContext, RelocationState
from .episodes import format_episode_number
from .errors import (
    DestinationNotFound,
    ErrorKind,
    IncompleteMetadata,
    MissingAssociation,
    NoUsableTitle,
    RelocationError,
)
from .logging_utils import render_fields_block
from .models import RelocationFailure, RelocationOutcome, RelocationRequest, RelocationSuccess
from .strategies import RelocationStrategy, get_strategy
from .templating import template_fields
from .titles import resolve_episode_title

LOGGER = logging.getLogger(__name__)


def _validate_associations(request: RelocationRequest) -> None:
    filename = request.file.filename
    if not request.series and not request.episodes:
        raise MissingAssociation(f"No series or episode is linked to {filename}")
    if not request.series:
        raise MissingAssociation(f"No series is linked to {filename}")
    if not request.episodes:
        raise MissingAssociation(f"No episode is linked to {filename}")


def _uses_field(context: RelocationContext, strategy: RelocationStrategy, name: str) -> bool:
    template = context.settings.film_template if context.is_film else context.settings.filename_template
    if template is None:
        template = strategy.film_template if context.is_film else strategy.filename_template
    if template is None:
        return False
    return name in template_fields(template)


def _resolve_titles(context: RelocationContext, strategy: RelocationStrategy, produce_filename: bool) -> None:
    context.series_title = strategy.resolve_series_title(context)
    if not context.series_title and strategy.requires_title:
        raise NoUsableTitle(f"No usable series title for {context.request.file.filename}")
    LOGGER.debug("Series title for %s: %s", context.request.file.filename, context.series_title)

    if produce_filename and _uses_field(context, strategy, "episode_title"):
        languages = context.settings.title_languages or strategy.title_languages
        context.episode_title = resolve_episode_title(context.episode, languages)
    context.advance(RelocationState.TITLE_RESOLVED)


def _label_episode(context: RelocationContext, strategy: RelocationStrategy, produce_filename: bool) -> None:
    if produce_filename and strategy.needs_episode_label and not context.is_film:
        episode = context.episode
        context.episode_label = format_episode_number(
            episode.number,
            episode.episode_type,
            context.series.episode_counts,
        )
        LOGGER.debug("Episode label for %s: %s", context.request.file.filename, context.episode_label)
    context.advance(RelocationState.EPISODE_LABELED)


def _choose_destination(context: RelocationContext, strategy: RelocationStrategy) -> None:
    try:
        context.decision = strategy.build_destination(context)
    except DestinationNotFound as exc:
        if not context.settings.defers_missing_destination:
            raise
        LOGGER.info("Deferring destination for %s: %s", context.request.file.filename, exc.message)
        context.deferred.append("destination")
    else:
        if context.decision.folder is None:
            LOGGER.info(
                "Strategy '%s' made no destination decision for %s: %s",
                strategy.name,
                context.request.file.filename,
                context.decision.reason,
            )
            context.deferred.append("destination")

    if context.classification is not None:
        context.advance(RelocationState.CLASSIFIED)
    context.advance(RelocationState.DESTINATION_CHOSEN)


def _compose(context: RelocationContext, strategy: RelocationStrategy) -> None:
    context.filename = strategy.build_filename(context)
    context.advance(RelocationState.COMPOSED)


def _assemble(context: RelocationContext, produce_filename: bool, produce_destination: bool) -> RelocationOutcome:
    decision = context.decision
    folder = decision.folder if decision else None
    if produce_filename and not context.filename:
        raise IncompleteMetadata("Filename was requested but not produced")
    if produce_destination and folder is None and "destination" not in context.deferred:
        raise DestinationNotFound("Destination was requested but not produced")

    return RelocationSuccess(
        filename=context.filename if produce_filename else None,
        destination=folder if produce_destination else None,
        subfolder=decision.subfolder if (produce_destination and decision and folder) else None,
        backup_path=decision.backup_path if decision else None,
        deferred=tuple(context.deferred),
    )


def relocate(
    request: RelocationRequest,
    settings: RelocationSettings | None = None,
    *,
    strategy: RelocationStrategy | None = None,
    path_exists: Callable[[str], bool] | None = None,
) -> RelocationOutcome:
    """Decide the new filename and destination for one file.

    Args:
        request: The file, its linked metadata and the available folders
        settings: Relocation settings; defaults apply when omitted
        strategy: Rule set to use instead of the one named by ``settings``
        path_exists: Host-supplied check for configured paths such as the
            backup root; the engine itself never touches the file system

    Returns:
        ``RelocationSuccess`` (possibly a no-op) or ``RelocationFailure``
    """
    settings = settings or RelocationSettings()
    context = RelocationContext(request=request, settings=settings, path_exists=path_exists)

    try:
        strategy = strategy or get_strategy(settings.strategy)
        produce_filename = request.produce_filename and strategy.supports_renaming
        produce_destination = request.produce_destination and strategy.supports_moving
        if not (produce_filename or produce_destination):
            LOGGER.debug(
                "Strategy '%s' has nothing to do for %s with the requested mode",
                strategy.name,
                request.file.filename,
            )
            context.advance(RelocationState.DONE)
            return RelocationSuccess()

        _validate_associations(request)
        _resolve_titles(context, strategy, produce_filename)
        _label_episode(context, strategy, produce_filename)
        if produce_destination:
            _choose_destination(context, strategy)
        if produce_filename:
            _compose(context, strategy)
        outcome = _assemble(context, produce_filename, produce_destination)
    except RelocationError as exc:
        context.advance(RelocationState.FAILED)
        LOGGER.warning("Unable to relocate %s (%s): %s", request.file.filename, exc.kind.value, exc.message)
        return RelocationFailure(kind=exc.kind, message=exc.message, cause=exc)
    except Exception as exc:  # noqa: BLE001
        context.advance(RelocationState.FAILED)
        LOGGER.exception("Unable to get new filename for %s", request.file.filename)
        return RelocationFailure(
            kind=ErrorKind.UNEXPECTED,
            message=f"Unable to get new filename for {request.file.filename}",
            cause=exc,
        )

    context.advance(RelocationState.DONE)
    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug(render_fields_block("Relocation decision", context.as_log_fields()))
    return outcome


@dataclass(frozen=True)
class Relocator:
    """Reusable binding of settings to a strategy.

    Holds no per-file state, so a single instance may serve concurrent
    callers.
    """

    settings: RelocationSettings
    path_exists: Callable[[str], bool] | None = None

    @property
    def strategy(self) -> RelocationStrategy:
        return get_strategy(self.settings.strategy)

    @property
    def supports_renaming(self) -> bool:
        return self.strategy.supports_renaming

    @property
    def supports_moving(self) -> bool:
        return self.strategy.supports_moving

    def relocate(self, request: RelocationRequest) -> RelocationOutcome:
        return relocate(request, self.settings, path_exists=self.path_exists)
