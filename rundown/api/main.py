"""
FastAPI application for the rundown back-office.

Every page sits behind HTTP basic auth. Lookup failures and malformed ids
become 404 pages; a failed write of the dataset file becomes a 500 and leaves
both memory and disk as they were.
"""

import re
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import ValidationError

from util.logging import logger

from . import views
from .schemas import EpisodeForm, HealthResponse, StoryForm
from ..core.config import AUTH_REALM, VERSION, debug_enabled, get_credentials, get_data_filename, get_seed
from ..core.placement import LockedRandom
from ..core.repo import NotFoundError
from ..core.schema import Story
from ..core.store import FileRepo, PersistenceError

security = HTTPBasic(realm=AUTH_REALM)


def require_editor(request: Request, credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """Check basic-auth credentials against the configured editor account."""
    username, password = request.app.state.credentials
    user_ok = secrets.compare_digest(credentials.username.encode("utf-8"), username.encode("utf-8"))
    pass_ok = secrets.compare_digest(credentials.password.encode("utf-8"), password.encode("utf-8"))
    if not (user_ok and pass_ok):
        logger.log_auth_failure(credentials.username, request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": f'Basic realm="{AUTH_REALM}"'},
        )
    return credentials.username


def get_repo(request: Request) -> FileRepo:
    return request.app.state.repo


ID_PATTERN = re.compile(r"-?[0-9]+")


def _parse_id(value: str) -> int:
    # Non-numeric ids are reported like any other missing story.
    if not ID_PATTERN.fullmatch(value):
        raise NotFoundError(f"invalid id {value!r}")
    return int(value)


def _first_error(e: ValidationError) -> str:
    error = e.errors()[0]
    return str(error.get("msg", "invalid input")).removeprefix("Value error, ")


router = APIRouter(dependencies=[Depends(require_editor)])


@router.get("/", response_class=HTMLResponse)
def list_episodes(repo: FileRepo = Depends(get_repo)):
    return views.index_page(repo.episode_list())


@router.post("/")
def create_episode(title: str = Form(""), repo: FileRepo = Depends(get_repo)):
    try:
        form = EpisodeForm(title=title)
    except ValidationError as e:
        return HTMLResponse(views.index_page(repo.episode_list(), error=_first_error(e)),
                            status_code=status.HTTP_400_BAD_REQUEST)

    episode = repo.add_episode(form.title)
    return RedirectResponse(views.episode_url(episode.slug), status_code=status.HTTP_302_FOUND)


@router.get("/{slug}", response_class=HTMLResponse)
def view_episode(slug: str, repo: FileRepo = Depends(get_repo)):
    episode = repo.episode_by_slug(slug)
    return views.episode_page(episode, repo.presenter_names())


@router.post("/{slug}")
def add_story(
    slug: str,
    title: str = Form(""),
    notes: str = Form(""),
    presenter: str = Form(""),
    segment: str = Form(""),
    repo: FileRepo = Depends(get_repo),
):
    episode = repo.episode_by_slug(slug)
    try:
        form = StoryForm(title=title, notes=notes, presenter=presenter, segment=segment)
    except ValidationError as e:
        return HTMLResponse(views.episode_page(episode, repo.presenter_names(), error=_first_error(e)),
                            status_code=status.HTTP_400_BAD_REQUEST)

    repo.add_story(slug, form.segment, Story(title=form.title, notes=form.notes, presenter=form.presenter))

    # Redirect so that refreshing the page does not post the story twice.
    return RedirectResponse(views.episode_url(slug), status_code=status.HTTP_303_SEE_OTHER)


def _story_for_editing(repo: FileRepo, slug: str, segment_id: str, story_id: str) -> Story:
    segment_index, story_index = _parse_id(segment_id), _parse_id(story_id)
    episode = repo.episode_by_slug(slug)
    segment = repo.segment_by_index(episode, segment_index)
    return repo.story_by_id(segment, story_index)


@router.get("/{slug}/{segment_id}/{story_id}/edit", response_class=HTMLResponse)
def edit_story(slug: str, segment_id: str, story_id: str, repo: FileRepo = Depends(get_repo)):
    story = _story_for_editing(repo, slug, segment_id, story_id)
    return views.edit_page(slug, _parse_id(segment_id), story, repo.presenter_names())


@router.post("/{slug}/{segment_id}/{story_id}/edit")
def update_story(
    slug: str,
    segment_id: str,
    story_id: str,
    title: str = Form(""),
    notes: str = Form(""),
    presenter: str = Form(""),
    repo: FileRepo = Depends(get_repo),
):
    story = _story_for_editing(repo, slug, segment_id, story_id)
    try:
        form = StoryForm(title=title, notes=notes, presenter=presenter)
    except ValidationError as e:
        return HTMLResponse(
            views.edit_page(slug, _parse_id(segment_id), story, repo.presenter_names(), error=_first_error(e)),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    repo.update_story(slug, _parse_id(segment_id), story.id, form.title, form.notes, form.presenter)
    return RedirectResponse(views.episode_url(slug), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/{slug}/{segment_id}/{story_id}/delete")
def delete_story(slug: str, segment_id: str, story_id: str, repo: FileRepo = Depends(get_repo)):
    repo.delete_story(slug, _parse_id(segment_id), _parse_id(story_id))
    return RedirectResponse(views.episode_url(slug), status_code=status.HTTP_303_SEE_OTHER)


def create_app(repo: FileRepo, username: str, password: str) -> FastAPI:
    """Build the back-office application over ``repo``."""
    app = FastAPI(
        title="Rundown",
        version=VERSION,
        description="Editorial back-office for episode rundowns",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url=None,
        openapi_url="/openapi.json" if debug_enabled() else None,
    )
    app.state.repo = repo
    app.state.credentials = (username, password)

    # Slugs never contain "_", so this path cannot shadow an episode.
    @app.get("/_health", response_model=HealthResponse)
    def health_check_endpoint():
        """Check system health."""
        return HealthResponse(status="healthy", version=VERSION, episodes=len(repo.episode_list()))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        logger.debug(f"Not found: {request.method} {request.url.path}: {exc}")
        return HTMLResponse(views.not_found_page(), status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error(f"Request {request.method} {request.url.path} failed: {exc}")
        return HTMLResponse(views.error_page(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        logger.error(f"Unhandled exception in {request.method} {request.url.path}: {exc!r}")
        return HTMLResponse(views.error_page(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    app.include_router(router)
    return app


_app: Optional[FastAPI] = None


def get_app() -> FastAPI:
    """Application over the configured dataset file, built on first use."""
    global _app
    if _app is None:
        repo = FileRepo.open(get_data_filename(), rng=LockedRandom(get_seed()))
        username, password = get_credentials()
        _app = create_app(repo, username, password)
    return _app
