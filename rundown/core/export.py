"""
One-shot export of the dataset to a Markdown document.

The exporter only reads: it neither migrates nor writes the dataset file.
"""

from pathlib import Path
from typing import List, Union

from util.logging import logger

from .schema import Episode
from .store import read_dataset


def render_markdown(episodes: List[Episode]) -> str:
    """Render episodes, newest first, with their non-empty segments."""
    lines = []
    for episode in episodes:
        lines.append(f"# {episode.title}")
        lines.append("")
        for segment in episode.segments:
            if not segment.stories:
                continue
            lines.append(f"## {segment.name}")
            lines.append("")
            for story in segment.stories:
                lines.append(f"### {story.title}")
                lines.append("")
                lines.append(f"Presenter: {story.presenter}")
                lines.append("")
                notes = story.notes.strip()
                if notes:
                    lines.extend(notes.splitlines())
                    lines.append("")
    return "\n".join(lines).rstrip("\n") + "\n" if lines else ""


def export_file(source: Union[str, Path], destination: Union[str, Path]) -> int:
    """Render the dataset at ``source`` into ``destination``.

    Returns the number of episodes exported.
    """
    dataset = read_dataset(source)
    document = render_markdown(dataset.episodes)
    Path(destination).write_text(document, encoding="utf-8")
    logger.log_operation("export", "success", {
        "source": str(source),
        "destination": str(destination),
        "episodes": len(dataset.episodes),
    })
    return len(dataset.episodes)
