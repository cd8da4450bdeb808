"""Named relocation rule sets.

Each strategy is a plain value: the title preferences it uses, the filename
templates it renders and the functions that produce its filename and
destination. Strategies are looked up by name from ``STRATEGIES`` using the
``strategy`` setting.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable
from dataclasses import dataclass

from .contexts import DestinationDecision, RelocationContext
from .destination_builder import (
    build_language_rules,
    classification_targets,
    find_duplicate_folder,
    find_folder_by_id,
    first_drop_destination,
    select_destination,
)
from .errors import DestinationNotFound, IncompleteMetadata, MissingAssociation, PreconditionFailed
from .filename_builder import FilenameParts, compose_filename
from .languages import classify_media_file
from .models import TitleLanguage, TitleType
from .titles import resolve_series_title, resolve_series_title_with_first_fallback
from .utils import replace_invalid_path_characters

LOGGER = logging.getLogger(__name__)

LANGUAGE_TIER_EPISODE_TEMPLATE = "{title} - {episode_label} - {episode_title}{extension}"
LANGUAGE_TIER_FILM_TEMPLATE = "{title} - {episode_title}{extension}"

FilenameBuilder = Callable[[RelocationContext], str]
DestinationBuilder = Callable[[RelocationContext], DestinationDecision]
TitleResolver = Callable[[RelocationContext], str]


@dataclass(frozen=True)
class RelocationStrategy:
    name: str
    description: str
    title_type: TitleType | None
    title_languages: tuple[TitleLanguage, ...]
    resolve_series_title: TitleResolver
    build_filename: FilenameBuilder | None = None
    build_destination: DestinationBuilder | None = None
    filename_template: str | None = None
    film_template: str | None = None
    needs_episode_label: bool = True
    requires_title: bool = True

    @property
    def supports_renaming(self) -> bool:
        return self.build_filename is not None

    @property
    def supports_moving(self) -> bool:
        return self.build_destination is not None


def _languages(context: RelocationContext, strategy: RelocationStrategy) -> tuple[TitleLanguage, ...]:
    return context.settings.title_languages or strategy.title_languages


def _title_type(context: RelocationContext, strategy: RelocationStrategy) -> TitleType | None:
    return context.settings.title_type or strategy.title_type


def _templates(context: RelocationContext, strategy: RelocationStrategy) -> tuple[str | None, str | None]:
    settings = context.settings
    return (
        settings.filename_template or strategy.filename_template,
        settings.film_template or strategy.film_template,
    )


def _filename_parts(context: RelocationContext) -> FilenameParts:
    media_file = context.request.file
    video = media_file.video
    provider = media_file.provider
    return FilenameParts(
        title=context.series_title,
        release_group=provider.release_group if provider else None,
        episode_label=None if context.is_film else context.episode_label,
        episode_title=context.episode_title,
        resolution=video.resolution if video else None,
        codec=video.codec if video else None,
        extension=media_file.extension,
    )


def _compose_for(strategy_name: str) -> FilenameBuilder:
    def build(context: RelocationContext) -> str:
        strategy = STRATEGIES[strategy_name]
        template, film_template = _templates(context, strategy)
        return compose_filename(
            _filename_parts(context),
            context.settings.active_prefix,
            template=template,
            film_template=film_template,
        )

    return build


# ---------------------------------------------------------------------------
# release_group: "[Group] Title - 04 [720p HEVC].mkv" into <group>/<series>
# ---------------------------------------------------------------------------


def _release_series_title(context: RelocationContext) -> str:
    strategy = STRATEGIES["release_group"]
    return resolve_series_title(context.series, _title_type(context, strategy), _languages(context, strategy))


def _grouped_subfolder(context: RelocationContext, strategy: RelocationStrategy) -> str:
    group = context.group
    if group is None or not group.name:
        raise MissingAssociation(f"No group name was found for {context.request.file.filename}")
    series_name = resolve_series_title_with_first_fallback(
        context.series, _title_type(context, strategy), _languages(context, strategy)
    )
    if not series_name:
        raise IncompleteMetadata("Series has no title to use as a folder name")
    return posixpath.join(
        replace_invalid_path_characters(group.name),
        replace_invalid_path_characters(series_name),
    )


def _release_destination(context: RelocationContext) -> DestinationDecision:
    strategy = STRATEGIES["release_group"]
    folder = first_drop_destination(context.request.available_folders)
    if folder is None:
        raise DestinationNotFound("No available folder is a drop destination")
    return DestinationDecision(folder=folder, subfolder=_grouped_subfolder(context, strategy))


# ---------------------------------------------------------------------------
# language_tier: library folders chosen by dub/sub coverage
# ---------------------------------------------------------------------------


def _language_tier_series_title(context: RelocationContext) -> str:
    strategy = STRATEGIES["language_tier"]
    return resolve_series_title(context.series, _title_type(context, strategy), _languages(context, strategy))


def _language_tier_destination(context: RelocationContext) -> DestinationDecision:
    settings = context.settings
    series = context.series
    context.classification = classify_media_file(context.request.file, classification_targets(settings))
    rules = build_language_rules(settings)
    folder = select_destination(
        context.classification,
        series.restricted,
        context.request.available_folders,
        rules,
        settings,
    )
    if folder is None:
        raise DestinationNotFound(
            f"No available folder matches the library path for {context.request.file.filename}"
        )
    subfolder = replace_invalid_path_characters(context.series_title or "")
    return DestinationDecision(folder=folder, subfolder=subfolder or None)


# ---------------------------------------------------------------------------
# backup: keep the file where it is, report where a copy should go
# ---------------------------------------------------------------------------


def _backup_series_title(context: RelocationContext) -> str:
    strategy = STRATEGIES["backup"]
    return resolve_series_title_with_first_fallback(
        context.series, _title_type(context, strategy), _languages(context, strategy)
    )


def _backup_destination(context: RelocationContext) -> DestinationDecision:
    backup_root = context.settings.backup_root_path
    if not backup_root:
        raise PreconditionFailed("No backup path is configured")
    if context.path_exists is None:
        LOGGER.debug("No path check supplied; assuming backup path %s exists", backup_root)
    elif not context.path_exists(backup_root):
        raise PreconditionFailed(f"Backup path does not exist: {backup_root}")

    group = context.group
    if group is None or not group.name:
        raise MissingAssociation(f"No group name was found for {context.request.file.filename}")

    media_file = context.request.file
    group_name = replace_invalid_path_characters(group.name)
    series_name = replace_invalid_path_characters(context.series_title or "")
    backup_path = posixpath.join(backup_root, group_name, series_name, media_file.filename)
    LOGGER.debug("Backup copy of %s goes to %s", media_file.filename, backup_path)

    # The backup path stands on its own when the source folder is not listed.
    folder = find_folder_by_id(context.request.available_folders, media_file.folder_id)
    if folder is None:
        return DestinationDecision(
            backup_path=backup_path,
            reason=f"The folder currently holding {media_file.filename} is not available",
        )

    relative_dir = posixpath.dirname(media_file.relative_path.replace("\\", "/"))
    return DestinationDecision(folder=folder, subfolder=relative_dir or None, backup_path=backup_path)


# ---------------------------------------------------------------------------
# original_name: the filename the release was published under
# ---------------------------------------------------------------------------


def _original_filename(context: RelocationContext) -> str:
    provider = context.request.file.provider
    original = provider.original_filename if provider else None
    if not original:
        raise IncompleteMetadata("No original filename was found")
    return replace_invalid_path_characters(original)


# ---------------------------------------------------------------------------
# duplicate: park files whose content is already linked elsewhere
# ---------------------------------------------------------------------------


def _preferred_series_title(context: RelocationContext) -> str:
    return context.series.preferred_title


def is_duplicate(context: RelocationContext) -> bool:
    content_hash = context.request.file.content_hash
    if not content_hash:
        return False
    wanted = content_hash.lower()
    return any(
        reference.lower() == wanted
        for episode in context.request.episodes
        for reference in episode.cross_reference_hashes
    )


def _duplicate_destination(context: RelocationContext) -> DestinationDecision:
    folder = find_duplicate_folder(context.request.available_folders)
    if folder is None:
        raise DestinationNotFound("Unable to find a folder for duplicate files")
    if not is_duplicate(context):
        return DestinationDecision.defer("File is not a duplicate")
    subfolder = replace_invalid_path_characters(context.series_title or "")
    return DestinationDecision(folder=folder, subfolder=subfolder or None)


STRATEGIES: dict[str, RelocationStrategy] = {
    "release_group": RelocationStrategy(
        name="release_group",
        description="Renames to '[Group] Title - 04 [720p HEVC].ext' and moves into <group>/<series>",
        title_type=TitleType.MAIN,
        title_languages=(TitleLanguage.ROMAJI,),
        resolve_series_title=_release_series_title,
        build_filename=_compose_for("release_group"),
        build_destination=_release_destination,
    ),
    "language_tier": RelocationStrategy(
        name="language_tier",
        description="Sorts into library folders by restriction and available dubs/subs",
        title_type=TitleType.OFFICIAL,
        title_languages=(TitleLanguage.GERMAN, TitleLanguage.ENGLISH, TitleLanguage.ROMAJI),
        resolve_series_title=_language_tier_series_title,
        build_filename=_compose_for("language_tier"),
        build_destination=_language_tier_destination,
        filename_template=LANGUAGE_TIER_EPISODE_TEMPLATE,
        film_template=LANGUAGE_TIER_FILM_TEMPLATE,
    ),
    "backup": RelocationStrategy(
        name="backup",
        description="Leaves files in place and reports a grouped backup location",
        title_type=TitleType.MAIN,
        title_languages=(TitleLanguage.ROMAJI,),
        resolve_series_title=_backup_series_title,
        build_destination=_backup_destination,
        needs_episode_label=False,
    ),
    "original_name": RelocationStrategy(
        name="original_name",
        description="Renames files to the name the provider lists for the release",
        title_type=None,
        title_languages=(),
        resolve_series_title=_preferred_series_title,
        build_filename=_original_filename,
        needs_episode_label=False,
        requires_title=False,
    ),
    "duplicate": RelocationStrategy(
        name="duplicate",
        description="Moves duplicate files to the 'Duplicate Files' folder",
        title_type=None,
        title_languages=(),
        resolve_series_title=_preferred_series_title,
        build_destination=_duplicate_destination,
        needs_episode_label=False,
        requires_title=False,
    ),
}


def get_strategy(name: str) -> RelocationStrategy:
    try:
        return STRATEGIES[name]
    except KeyError as exc:
        known = ", ".join(sorted(STRATEGIES))
        raise ValueError(f"Unknown relocation strategy '{name}' (known: {known})") from exc
