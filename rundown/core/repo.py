"""
In-memory custody of the dataset: episodes, their segments and stories.
"""

from typing import List, Optional

from .placement import LockedRandom, RandomSource, choose_index
from .schema import Dataset, Episode, Segment, Story


class NotFoundError(LookupError):
    """Requested episode, segment or story does not exist."""


def slugify(title: str) -> str:
    """Lowercase ``title`` and replace every non letter/digit with ``-``."""
    return "".join(c if c.isalnum() else "-" for c in title.lower())


def _unique_slug(base: str, episodes: List[Episode]) -> str:
    taken = {e.slug for e in episodes}
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


def _next_story_id(segment: Segment) -> int:
    # Equals the post-insert story count unless a delete left a higher id behind.
    highest = max((s.id for s in segment.stories), default=0)
    return max(len(segment.stories), highest) + 1


class Repo:
    """Episode/segment aggregate over a :class:`Dataset`."""

    def __init__(self, dataset: Optional[Dataset] = None, rng: Optional[RandomSource] = None):
        self.dataset = dataset if dataset is not None else Dataset()
        self.rng = rng if rng is not None else LockedRandom()

    def add_episode(self, title: str) -> Episode:
        """Create an episode with the default segments and put it first."""
        episode = Episode(
            title=title,
            slug=_unique_slug(slugify(title), self.dataset.episodes),
            segments=[Segment(name=name) for name in self.dataset.default_segments],
        )
        self.dataset.episodes.insert(0, episode)
        return episode

    def episode_list(self) -> List[Episode]:
        return self.dataset.episodes

    def episode_by_slug(self, slug: str) -> Episode:
        for episode in self.dataset.episodes:
            if episode.slug == slug:
                return episode
        raise NotFoundError(f"episode {slug!r} not found")

    def segment_by_name(self, episode: Episode, name: str) -> Segment:
        for segment in episode.segments:
            if segment.name == name:
                return segment
        raise NotFoundError(f"segment {name!r} not found in episode {episode.slug!r}")

    def segment_by_index(self, episode: Episode, index: int) -> Segment:
        if index < 0 or index >= len(episode.segments):
            raise NotFoundError(f"segment #{index} not found in episode {episode.slug!r}")
        return episode.segments[index]

    def story_by_id(self, segment: Segment, story_id: int) -> Story:
        for story in segment.stories:
            if story.id == story_id:
                return story
        raise NotFoundError(f"story {story_id} not found in segment {segment.name!r}")

    def add_story(self, slug: str, segment_name: str, story: Story) -> Story:
        """Assign ``story`` an id and splice it into the named segment."""
        segment = self.segment_by_name(self.episode_by_slug(slug), segment_name)
        story.id = _next_story_id(segment)
        index = choose_index(segment.stories, story.presenter, self.rng)
        segment.stories.insert(index, story)
        return story

    def update_story(self, slug: str, segment_index: int, story_id: int,
                     title: str, notes: str, presenter: str) -> Story:
        """Edit a story in place; its position in the segment is kept."""
        segment = self.segment_by_index(self.episode_by_slug(slug), segment_index)
        story = self.story_by_id(segment, story_id)
        story.title = title
        story.notes = notes
        story.presenter = presenter
        return story

    def delete_story(self, slug: str, segment_index: int, story_id: int) -> Story:
        segment = self.segment_by_index(self.episode_by_slug(slug), segment_index)
        story = self.story_by_id(segment, story_id)
        # Remove by identity; two stories may compare equal field by field.
        segment.stories = [s for s in segment.stories if s is not story]
        return story

    def presenter_names(self) -> List[str]:
        return self.dataset.presenters
