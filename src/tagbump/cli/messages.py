"""Localized status messages for the command line.

The language follows the user's locale (``LC_ALL``, ``LC_MESSAGES``,
``LANG``). Russian and English are available; anything else falls back
to English.
"""

from __future__ import annotations

import os

DEFAULT_LANGUAGE = "en"

_CATALOG: dict[str, dict[str, str]] = {
    "en": {
        "nothing_to_release": "No releasable changes found since the last release.",
        "force_hint": "Use [cyan]--force[/] to release a patch version anyway.",
        "config_error": "Error loading config:",
        "error": "Error:",
        "plan_error": "Error determining next version:",
        "release_failed": "Release failed:",
        "updated": "Updated {path}",
        "committed": "Committed {sha}",
        "tagged": "Tagged {tag}",
        "pushed": "Pushed to {remote}",
        "push_hint": "To publish, run:",
    },
    "ru": {
        "nothing_to_release": "С последнего релиза нет изменений для выпуска.",
        "force_hint": "Чтобы выпустить патч-версию, используйте флаг [cyan]--force[/].",
        "config_error": "Ошибка загрузки конфигурации:",
        "error": "Ошибка:",
        "plan_error": "Не удалось определить следующую версию:",
        "release_failed": "Не удалось выпустить релиз:",
        "updated": "Обновлён {path}",
        "committed": "Создан коммит {sha}",
        "tagged": "Создан тэг {tag}",
        "pushed": "Отправлено в {remote}",
        "push_hint": "Чтобы опубликовать, выполните:",
    },
}


def current_language() -> str:
    """Return the catalog language for the current locale."""
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value:
            language = value.split(".")[0].replace("-", "_").split("_")[0].lower()
            return language if language in _CATALOG else DEFAULT_LANGUAGE
    return DEFAULT_LANGUAGE


def message(key: str, **kwargs: object) -> str:
    """Return the localized message for ``key``, formatted with ``kwargs``."""
    text = _CATALOG[current_language()].get(key) or _CATALOG[DEFAULT_LANGUAGE][key]
    return text.format(**kwargs) if kwargs else text
