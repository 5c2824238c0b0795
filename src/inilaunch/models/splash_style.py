"""Presentation settings handed to the splash window."""

from pydantic import BaseModel, ConfigDict

DEFAULT_TITLE_TEXT = "Starting application"
DEFAULT_LOADING_TEXT = "Loading, please wait..."
DEFAULT_TITLE_COLOR = "#FFFFFF"
DEFAULT_LOADING_COLOR = "#C8C8C8"
DEFAULT_BACKGROUND_COLOR = "#1F2A44"


class SplashStyle(BaseModel):
    """Immutable snapshot of what the splash window shows."""

    model_config = ConfigDict(frozen=True)

    title_text: str = DEFAULT_TITLE_TEXT
    loading_text: str = DEFAULT_LOADING_TEXT
    title_color: str = DEFAULT_TITLE_COLOR
    loading_color: str = DEFAULT_LOADING_COLOR
    background_color: str = DEFAULT_BACKGROUND_COLOR
