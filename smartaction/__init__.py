"""Smart Action — typed actions from language model output."""

from smartaction.config import __version__

__all__ = ["__version__"]
