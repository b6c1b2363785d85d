"""Localized prompt templates with randomized phrasing.

Each locale provides a pool of interchangeable templates per category. Pools
are validated and frozen once at load time; every turn only reads them.
Templates use positional ``str.format`` placeholders (``{0}``, ``{1}``, ...).
"""

from __future__ import annotations

import random
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from times_table_trainer.core.config import Settings
from times_table_trainer.core.exceptions import (
    LocaleNotConfiguredError,
    PromptConfigurationError,
)
from times_table_trainer.core.logging import get_logger
from times_table_trainer.core.ports import PromptPools, RandomSource, TemplateSourcePort

logger = get_logger(__name__)

DEFAULT_PROMPTS_PATH = Path(__file__).parent / "prompts_data.json"


class PromptCategory(str, Enum):
    """Template pool keys shared by every locale."""

    GREETING = "greeting"
    QUESTION = "question"  # {0} x {1}
    CORRECT = "correct"
    WRONG = "wrong"
    RESULT = "result"  # {0} x {1} = {2}
    PASS = "pass"
    CURRENT_STREAK = "current_streak"  # {0}
    BEST_STREAK = "best_streak"  # {0}
    GOODBYE = "goodbye"
    FALLBACK = "fallback"


def normalize_locale(locale: Optional[str]) -> str:
    """Lowercase a locale tag and unify separators (``en_US`` -> ``en-us``)."""
    return str(locale or "").strip().replace("_", "-").lower()


def _freeze_pools(pools: Any) -> Mapping[str, Mapping[PromptCategory, tuple[str, ...]]]:
    if not isinstance(pools, Mapping) or not pools:
        raise PromptConfigurationError("prompt pools must be a non-empty mapping of locales")

    frozen: dict[str, Mapping[PromptCategory, tuple[str, ...]]] = {}
    for locale, categories in pools.items():
        key = normalize_locale(locale)
        if not key:
            raise PromptConfigurationError("prompt pools contain an empty locale key")
        if key in frozen:
            raise PromptConfigurationError(f"duplicate locale in prompt pools: {locale!r}")
        if not isinstance(categories, Mapping):
            raise PromptConfigurationError(f"locale {locale!r} must map categories to templates")

        locale_pools: dict[PromptCategory, tuple[str, ...]] = {}
        for category in PromptCategory:
            templates = categories.get(category.value)
            if (
                not isinstance(templates, (list, tuple))
                or not templates
                or not all(isinstance(t, str) and t.strip() for t in templates)
            ):
                raise PromptConfigurationError(
                    f"locale {locale!r} needs a non-empty list of templates for {category.value!r}"
                )
            locale_pools[category] = tuple(templates)
        frozen[key] = MappingProxyType(locale_pools)
    return MappingProxyType(frozen)


class PromptCatalog:
    """Random template selection over validated, locale-scoped pools."""

    def __init__(
        self,
        pools: PromptPools,
        default_locale: str,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._pools = _freeze_pools(pools)
        self._default_locale = normalize_locale(default_locale)
        self._rng: RandomSource = rng if rng is not None else random.Random()

    @property
    def default_locale(self) -> str:
        """Normalized default locale key."""
        return self._default_locale

    def locales(self) -> list[str]:
        """Return the configured locale keys."""
        return sorted(self._pools)

    def resolve_locale(self, locale: Optional[str]) -> str:
        """Map a requested locale to a configured pool key.

        Order: exact tag, then its base language (``en-gb`` -> ``en``), then the
        default locale. Raises ``LocaleNotConfiguredError`` if nothing matches.
        """
        requested = normalize_locale(locale)
        if requested in self._pools:
            return requested
        base = requested.split("-", 1)[0]
        if base in self._pools:
            return base
        if self._default_locale in self._pools:
            if requested:
                logger.debug(
                    "No prompts for locale '%s'; using default '%s'",
                    locale,
                    self._default_locale,
                )
            return self._default_locale
        raise LocaleNotConfiguredError(
            f"no prompt pools for locale {locale!r} or default {self._default_locale!r}"
        )

    def pick(self, category: PromptCategory, locale: Optional[str]) -> str:
        """Return one template for ``category`` chosen uniformly at random."""
        pool = self._pools[self.resolve_locale(locale)][PromptCategory(category)]
        return self._rng.choice(pool)

    def render(self, category: PromptCategory, locale: Optional[str], *values: Any) -> str:
        """Pick a template and fill its positional placeholders with ``values``."""
        template = self.pick(category, locale)
        try:
            return template.format(*values)
        except (IndexError, KeyError) as exc:
            raise PromptConfigurationError(
                f"template {template!r} for {PromptCategory(category).value!r} "
                f"does not accept {len(values)} positional values"
            ) from exc


def load_prompt_catalog(
    settings: Settings,
    *,
    source: Optional[TemplateSourcePort] = None,
    rng: Optional[RandomSource] = None,
) -> PromptCatalog:
    """Build the catalog from ``source`` or the configured/packaged JSON file."""
    if source is None:
        # pylint: disable=import-outside-toplevel
        from times_table_trainer.adapters.prompt_files import JsonPromptSource

        source = JsonPromptSource(settings.PROMPTS_PATH or DEFAULT_PROMPTS_PATH)
    catalog = PromptCatalog(source.load_pools(), settings.DEFAULT_LOCALE, rng=rng)
    # Fail at startup rather than on the first turn.
    catalog.resolve_locale(settings.DEFAULT_LOCALE)
    logger.info("Loaded prompt pools for locales: %s", ", ".join(catalog.locales()))
    return catalog


__all__ = [
    "PromptCategory",
    "PromptCatalog",
    "DEFAULT_PROMPTS_PATH",
    "load_prompt_catalog",
    "normalize_locale",
]
