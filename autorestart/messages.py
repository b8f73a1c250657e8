"""Message keys shown to players and their English fallbacks."""

from typing import TYPE_CHECKING, Callable, Dict, Optional

from .logger import logger

if TYPE_CHECKING:
    from .host import Client

RESTART_WARNING = "restart_warning"
RESTART_COUNTDOWN_CHAT = "restart_countdown_chat"
RESTART_COUNTDOWN_CENTER = "restart_countdown_center"
RESTART_NOW_CHAT = "restart_now_chat"
RESTART_NOW_CENTER = "restart_now_center"
MANUAL_RESTART_DISABLED = "manual_restart_disabled"
MANUAL_RESTART_SCHEDULED = "manual_restart_scheduled"

DEFAULT_MESSAGES: Dict[str, str] = {
    RESTART_WARNING: "Server will restart in {0} seconds.",
    RESTART_COUNTDOWN_CHAT: "Server restarting in {0}...",
    RESTART_COUNTDOWN_CENTER: "Server restarting in {0}...",
    RESTART_NOW_CHAT: "Server is restarting now...",
    RESTART_NOW_CENTER: "Server is restarting now...",
    MANUAL_RESTART_DISABLED: "Manual restart is disabled.",
    MANUAL_RESTART_SCHEDULED: (
        "Manual restart scheduled. Server will restart in {0} seconds."
    ),
}

# (client, key, *args) -> localized text, or None when there is no translation
Localizer = Callable[..., Optional[str]]


class TemplateLocalizer:
    """Localizer backed by a `{key: template}` table, e.g. from config."""

    def __init__(self, templates: Dict[str, str]):
        self.templates = dict(templates)

    def __call__(self, client: "Client", key: str, *args: object) -> Optional[str]:
        template = self.templates.get(key)
        if template is None:
            return None
        try:
            return template.format(*args)
        except (IndexError, KeyError, ValueError) as e:
            logger.warning(f"Bad template for message '{key}': {template!r} ({e})")
            return None


class Messages:
    """
    Resolves message keys for a given client.

    The localizer is injected rather than looked up globally; when it is
    missing or has no text for a key, the English default is used.
    """

    def __init__(self, localizer: Optional[Localizer] = None):
        self.localizer = localizer

    def for_client(self, client: "Client", key: str, *args: object) -> str:
        if self.localizer is not None:
            text = self.localizer(client, key, *args)
            if text is not None:
                return text
        return DEFAULT_MESSAGES[key].format(*args)
