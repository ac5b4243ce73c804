"""
HTML pages of the back-office.
"""

from html import escape
from typing import List, Optional
from urllib.parse import quote

from ..core.schema import Episode, Story


def episode_url(slug: str) -> str:
    return "/" + quote(slug)


def story_url(slug: str, segment_index: int, story_id: int, action: str) -> str:
    return f"{episode_url(slug)}/{segment_index}/{story_id}/{action}"


def layout(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{escape(title)}</title>\n"
        "</head>\n"
        "<body>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


def _options(values: List[str], selected: Optional[str] = None) -> str:
    return "".join(
        f'<option value="{escape(v)}"{" selected" if v == selected else ""}>{escape(v)}</option>'
        for v in values
    )


def story_form(action: str, presenters: List[str], segments: Optional[List[str]] = None,
               story: Optional[Story] = None, error: Optional[str] = None) -> str:
    """Form for adding a story, or for editing ``story`` when it is given."""
    editing = story is not None
    story = story or Story(title="")
    if editing and story.presenter and story.presenter not in presenters:
        presenters = presenters + [story.presenter]
    parts = [f'<form method="post" action="{escape(action)}">']
    if error:
        parts.append(f'<p role="alert">{escape(error)}</p>')
    if not editing and segments is not None:
        parts.append(
            '<label>Segment <select name="segment">'
            f"{_options(segments)}</select></label>"
        )
    parts.append(
        '<label>Title <input type="text" name="title" '
        f'value="{escape(story.title)}" required></label>'
    )
    parts.append(
        '<label>Presenter <select name="presenter">'
        f"{_options(presenters, story.presenter)}</select></label>"
    )
    parts.append(f'<label>Notes <textarea name="notes">{escape(story.notes)}</textarea></label>')
    parts.append(f'<button type="submit">{"Save" if editing else "Add story"}</button>')
    parts.append("</form>")
    return "\n".join(parts)


def index_page(episodes: List[Episode], error: Optional[str] = None) -> str:
    items = "".join(
        f'<li><a href="{escape(episode_url(e.slug))}">{escape(e.title)}</a></li>'
        for e in episodes
    )
    body = [
        "<h1>Episodes</h1>",
        '<form method="post" action="/">',
    ]
    if error:
        body.append(f'<p role="alert">{escape(error)}</p>')
    body.extend([
        '<label>Title <input type="text" name="title" required></label>',
        '<button type="submit">Create episode</button>',
        "</form>",
        f"<ul>{items}</ul>" if episodes else "<p>No episodes yet.</p>",
    ])
    return layout("Episodes", "\n".join(body))


def episode_page(episode: Episode, presenters: List[str], error: Optional[str] = None) -> str:
    body = [f"<h1>{escape(episode.title)}</h1>", '<p><a href="/">All episodes</a></p>']
    for segment_index, segment in enumerate(episode.segments):
        body.append(f"<h2>{escape(segment.name)}</h2>")
        if not segment.stories:
            body.append("<p>No stories.</p>")
            continue
        body.append("<ol>")
        for story in segment.stories:
            edit = story_url(episode.slug, segment_index, story.id, "edit")
            delete = story_url(episode.slug, segment_index, story.id, "delete")
            body.append(
                "<li>"
                f"<h3>{escape(story.title)}</h3>"
                f"<p>{escape(story.presenter)}</p>"
                f"<p>{story.notes_html()}</p>"
                f'<a href="{escape(edit)}">Edit</a> '
                f'<form method="post" action="{escape(delete)}"><button type="submit">Delete</button></form>'
                "</li>"
            )
        body.append("</ol>")
    body.append("<h2>Add a story</h2>")
    body.append(story_form(episode_url(episode.slug), presenters, episode.segment_names(), error=error))
    return layout(episode.title, "\n".join(body))


def edit_page(slug: str, segment_index: int, story: Story, presenters: List[str],
              error: Optional[str] = None) -> str:
    action = story_url(slug, segment_index, story.id, "edit")
    body = [
        f"<h1>Edit {escape(story.title)}</h1>",
        f'<p><a href="{escape(episode_url(slug))}">Back</a></p>',
        story_form(action, presenters, story=story, error=error),
    ]
    return layout(f"Edit {story.title}", "\n".join(body))


def not_found_page() -> str:
    return layout("Not found", "<h1>404 page not found</h1>")


def error_page() -> str:
    return layout("Error", "<h1>Internal Server Error</h1>")
