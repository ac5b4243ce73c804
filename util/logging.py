"""
Structured logging shared by the rundown core, the HTTP layer and the scripts.
"""

import logging
from typing import Any, Dict

NOTES_PREVIEW_LENGTH = 50


class StructuredLogger:
    """Structured logger for rundown operations."""

    def __init__(self, name: str = "rundown"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status == "failed":
            self.logger.error(message)
        else:
            self.logger.info(message)

    def log_episode_operation(self, operation: str, slug: str, title: str = None, status: str = "success"):
        """Log an episode-level operation."""
        details = {"slug": slug}
        if title is not None:
            details["title"] = title

        self.log_operation(f"episode.{operation}", status, details)

    def log_story_operation(self, operation: str, slug: str, segment: str, story_id: int,
                            presenter: str = None, notes: str = None, status: str = "success"):
        """Log a story-level operation."""
        details = {"slug": slug, "segment": segment, "story_id": story_id}
        if presenter is not None:
            details["presenter"] = presenter
        if notes is not None:
            details["notes"] = truncate(notes)

        self.log_operation(f"story.{operation}", status, details)

    def log_placement(self, policy: str, index: int, candidates: int, presenter: str):
        """Log which placement policy chose the insertion index."""
        self.logger.debug(
            f"Operation: placement.{policy}, Status: chosen, "
            f"Details: {{'index': {index}, 'candidates': {candidates}, 'presenter': {presenter!r}}}"
        )

    def log_persistence(self, operation: str, path: str, status: str = "success", details: Dict[str, Any] = None):
        """Log a load or save of the dataset file."""
        log_details = {"path": path}
        if details:
            log_details.update(details)

        self.log_operation(f"persistence.{operation}", status, log_details)

    def log_migration(self, path: str, from_version: int, to_version: int, stories: int):
        """Log a schema migration."""
        self.log_operation("persistence.migrate", "success", {
            "path": path,
            "from_version": from_version,
            "to_version": to_version,
            "stories_renumbered": stories,
        })

    def log_auth_failure(self, username: str, path: str):
        """Log a rejected basic-auth attempt. The password is never logged."""
        self.logger.warning(f"Authentication failed for user {username!r} on {path}")

    def info(self, message: str) -> None:
        """Log info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log debug message."""
        self.logger.debug(message)


def truncate(value: str, length: int = NOTES_PREVIEW_LENGTH) -> str:
    """Shorten long free-form text for log details."""
    return value[:length] + "..." if len(value) > length else value


# Global logger instance
logger = StructuredLogger()
