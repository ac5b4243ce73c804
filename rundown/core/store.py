"""
File-backed repository.

``FileRepo`` wraps a :class:`Repo` and rewrites the whole dataset file after
every change. All access goes through one process-wide lock; reads hand out
deep copies so a caller never sees a half-applied change.
"""

import copy
import json
import os
import stat
import tempfile
import threading
from pathlib import Path
from typing import List, Optional, Union

from util.logging import logger

from .placement import RandomSource
from .repo import Repo
from .schema import CURRENT_DB_VERSION, Dataset, Episode, Segment, Story


class PersistenceError(Exception):
    """Raised when the dataset file cannot be read or written."""


def read_dataset(path: Union[str, Path]) -> Dataset:
    """Parse a dataset file without migrating it."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            return Dataset.from_dict(json.load(f))
    except FileNotFoundError as e:
        raise PersistenceError(f"dataset file {path} does not exist") from e
    except (OSError, ValueError, TypeError, AttributeError) as e:
        raise PersistenceError(f"cannot read dataset file {path}: {e}") from e


def _file_mode(path: Path) -> int:
    """Mode for the rewritten file: the existing file's, or 0666 less the umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_dataset(path: Union[str, Path], dataset: Dataset) -> None:
    """Write the dataset to a temporary sibling, then rename it over ``path``."""
    path = Path(path)
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_path = Path(tmp.name)
            json.dump(dataset.to_dict(), tmp, indent="\t", ensure_ascii=False)
            tmp.write("\n")
        os.chmod(tmp_path, _file_mode(path))
        os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError) as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise PersistenceError(f"cannot write dataset file {path}: {e}") from e


def migrate(dataset: Dataset) -> int:
    """Bring an unversioned dataset to the current schema.

    Story ids are renumbered by position within each segment. Returns the
    number of stories renumbered; zero when the dataset is already current.
    """
    if dataset.db_version == CURRENT_DB_VERSION:
        return 0
    if dataset.db_version > CURRENT_DB_VERSION:
        raise PersistenceError(f"unsupported DBVersion {dataset.db_version}")

    renumbered = 0
    for episode in dataset.episodes:
        for segment in episode.segments:
            for position, story in enumerate(segment.stories):
                story.id = position + 1
                renumbered += 1
    dataset.db_version = CURRENT_DB_VERSION
    return renumbered


class FileRepo:
    """Write-through persistence facade over the episode aggregate."""

    def __init__(self, path: Union[str, Path], dataset: Optional[Dataset] = None,
                 rng: Optional[RandomSource] = None):
        self.path = Path(path)
        self._repo = Repo(dataset, rng)
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: Union[str, Path], rng: Optional[RandomSource] = None) -> "FileRepo":
        """Load and migrate the dataset at ``path``.

        Raises PersistenceError if the file is missing or unparsable.
        """
        dataset = read_dataset(path)
        from_version = dataset.db_version
        renumbered = migrate(dataset)
        if from_version != dataset.db_version:
            logger.log_migration(str(path), from_version, dataset.db_version, renumbered)

        logger.log_persistence("load", str(path), details={"episodes": len(dataset.episodes)})
        return cls(path, dataset, rng)

    @classmethod
    def create(cls, path: Union[str, Path], default_segments: List[str], presenters: List[str],
               rng: Optional[RandomSource] = None) -> "FileRepo":
        """Write a new, empty dataset to ``path`` and return a repo over it."""
        dataset = Dataset(
            db_version=CURRENT_DB_VERSION,
            default_segments=list(default_segments),
            presenters=list(presenters),
        )
        repo = cls(path, dataset, rng)
        repo.save()
        return repo

    @classmethod
    def migrate_file(cls, path: Union[str, Path]) -> bool:
        """Migrate the dataset file at ``path`` in place.

        Returns False when the file was already current and was left untouched.
        """
        dataset = read_dataset(path)
        from_version = dataset.db_version
        renumbered = migrate(dataset)
        if from_version != dataset.db_version:
            write_dataset(path, dataset)
            logger.log_migration(str(path), from_version, dataset.db_version, renumbered)
            return True
        return False

    def save(self) -> None:
        with self._lock:
            try:
                write_dataset(self.path, self._repo.dataset)
            except PersistenceError:
                logger.log_persistence("save", str(self.path), status="failed")
                raise
            logger.log_persistence("save", str(self.path))

    def _mutate(self, operation, *args):
        # Apply to memory, write to disk, and restore the previous state if the write fails.
        with self._lock:
            snapshot = copy.deepcopy(self._repo.dataset)
            result = operation(*args)
            try:
                self.save()
            except PersistenceError:
                self._repo.dataset = snapshot
                raise
            return copy.deepcopy(result)

    # Reads

    def snapshot(self) -> Dataset:
        with self._lock:
            return copy.deepcopy(self._repo.dataset)

    def episode_list(self) -> List[Episode]:
        with self._lock:
            return copy.deepcopy(self._repo.episode_list())

    def episode_by_slug(self, slug: str) -> Episode:
        with self._lock:
            return copy.deepcopy(self._repo.episode_by_slug(slug))

    def segment_by_name(self, episode: Episode, name: str) -> Segment:
        return self._repo.segment_by_name(episode, name)

    def segment_by_index(self, episode: Episode, index: int) -> Segment:
        return self._repo.segment_by_index(episode, index)

    def story_by_id(self, segment: Segment, story_id: int) -> Story:
        return self._repo.story_by_id(segment, story_id)

    def presenter_names(self) -> List[str]:
        with self._lock:
            return list(self._repo.presenter_names())

    # Writes

    def add_episode(self, title: str) -> Episode:
        episode = self._mutate(self._repo.add_episode, title)
        logger.log_episode_operation("add", episode.slug, title)
        return episode

    def add_story(self, slug: str, segment_name: str, story: Story) -> Story:
        """Place ``story`` in the named segment; returns the stored copy with its id."""
        added = self._mutate(self._repo.add_story, slug, segment_name, copy.deepcopy(story))
        story.id = added.id
        logger.log_story_operation("add", slug, segment_name, added.id,
                                   presenter=added.presenter, notes=added.notes)
        return added

    def update_story(self, slug: str, segment_index: int, story_id: int,
                     title: str, notes: str, presenter: str) -> Story:
        story = self._mutate(self._repo.update_story, slug, segment_index, story_id,
                             title, notes, presenter)
        logger.log_story_operation("update", slug, f"#{segment_index}", story_id,
                                   presenter=presenter, notes=notes)
        return story

    def delete_story(self, slug: str, segment_index: int, story_id: int) -> Story:
        story = self._mutate(self._repo.delete_story, slug, segment_index, story_id)
        logger.log_story_operation("delete", slug, f"#{segment_index}", story_id)
        return story
