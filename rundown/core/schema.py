"""
Dataset records and their on-disk representation.

Field names on disk are capitalised (``DBVersion``, ``Episodes``, ``Title``,
...) and must stay that way so existing data files keep loading.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .notes import notes_html

CURRENT_DB_VERSION = 1


@dataclass
class Story:
    title: str
    notes: str = ""
    presenter: str = ""
    id: int = 0

    def notes_html(self) -> str:
        return notes_html(self.notes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ID": self.id,
            "Title": self.title,
            "Notes": self.notes,
            "Presenter": self.presenter,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Story":
        # Unversioned files carry no ID; migration assigns one.
        return cls(
            id=int(data.get("ID") or 0),
            title=data.get("Title") or "",
            notes=data.get("Notes") or "",
            presenter=data.get("Presenter") or "",
        )


@dataclass
class Segment:
    name: str
    stories: List[Story] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "Stories": [s.to_dict() for s in self.stories],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Segment":
        return cls(
            name=data.get("Name") or "",
            stories=[Story.from_dict(s) for s in data.get("Stories") or []],
        )


@dataclass
class Episode:
    title: str
    slug: str
    segments: List[Segment] = field(default_factory=list)

    def segment_names(self) -> List[str]:
        """Names of this episode's segments, in rundown order."""
        return [s.name for s in self.segments]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Title": self.title,
            "Slug": self.slug,
            "Segments": [s.to_dict() for s in self.segments],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Episode":
        return cls(
            title=data.get("Title") or "",
            slug=data.get("Slug") or "",
            segments=[Segment.from_dict(s) for s in data.get("Segments") or []],
        )


@dataclass
class Dataset:
    db_version: int = 0
    episodes: List[Episode] = field(default_factory=list)
    default_segments: List[str] = field(default_factory=list)
    presenters: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "DBVersion": self.db_version,
            "Episodes": [e.to_dict() for e in self.episodes],
            "DefaultSegments": list(self.default_segments),
            "Presenters": list(self.presenters),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dataset":
        if not isinstance(data, dict):
            raise ValueError(f"dataset document must be an object, got {type(data).__name__}")
        return cls(
            db_version=int(data.get("DBVersion") or 0),
            episodes=[Episode.from_dict(e) for e in data.get("Episodes") or []],
            default_segments=list(data.get("DefaultSegments") or []),
            presenters=list(data.get("Presenters") or []),
        )
