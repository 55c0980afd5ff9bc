from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_project_dir() -> Path:
    return Path(os.getenv("CEC_TOOLKIT_PROJECTDIR", os.getcwd()))


@dataclass(frozen=True)
class Settings:
    """Server settings, read from the environment unless given explicitly."""

    project_dir: Path = field(default_factory=_default_project_dir)
    default_template: str = field(default_factory=lambda: os.getenv("CEC_DEFAULT_TEMPLATE", ""))
    log_level: str = field(default_factory=lambda: os.getenv("CEC_LOG_LEVEL", "INFO"))

    @property
    def src_dir(self) -> Path:
        return self.project_dir / "src"


def load_settings(
    project_dir: str | Path | None = None,
    template: str | None = None,
    log_level: str | None = None,
) -> Settings:
    """Build settings from the environment, letting non-None arguments win."""
    base = Settings()
    return Settings(
        project_dir=Path(project_dir) if project_dir is not None else base.project_dir,
        default_template=template if template is not None else base.default_template,
        log_level=log_level if log_level is not None else base.log_level,
    )


def configure_logging(level: str) -> None:
    """Route log records through rich for terminal output."""
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
