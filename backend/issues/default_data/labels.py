import logging
from typing import Dict, Optional

from django.conf import settings
from django.utils import translation
from django.utils.translation import gettext_noop

logger = logging.getLogger(__name__)

LABELS: Dict[str, str] = {
    "default_role_admin": gettext_noop("Admin"),
    "default_role_moderator": gettext_noop("Moderator"),
    "default_role_trainee": gettext_noop("Trainee"),
    "default_role_automation": gettext_noop("Automation"),
    "default_priority_low": gettext_noop("Low"),
    "default_priority_normal": gettext_noop("Normal"),
    "default_priority_high": gettext_noop("High"),
    "default_priority_urgent": gettext_noop("Urgent"),
    "label_assigned_to_me_issues": gettext_noop("Issues assigned to me"),
    "label_reported_issues": gettext_noop("Reported issues"),
    "label_updated_issues": gettext_noop("Updated issues"),
    "label_watched_issues": gettext_noop("Watched issues"),
    "label_my_projects": gettext_noop("My projects"),
    "label_my_bookmarks": gettext_noop("My bookmarks"),
}


def select_language(lang: Optional[str]) -> str:
    """Return the supported language closest to ``lang``, or the site default."""
    try:
        return translation.get_supported_language_variant(str(lang or "").strip().lower() or settings.LANGUAGE_CODE)
    except LookupError:
        logger.info("Language %r is not supported, falling back to %s", lang, settings.LANGUAGE_CODE)
        return settings.LANGUAGE_CODE


def resolve(key: str, locale: str, default: Optional[str] = None) -> str:
    message = LABELS.get(key) or default or key
    with translation.override(locale):
        return translation.gettext(message)


class LabelResolver:
    def __init__(self, locale: str) -> None:
        self.locale = locale

    def __call__(self, key: str, default: Optional[str] = None) -> str:
        return resolve(key, self.locale, default)
