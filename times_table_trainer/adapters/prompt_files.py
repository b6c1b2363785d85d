"""Template source adapter reading locale pools from a JSON file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from times_table_trainer.core.exceptions import PromptConfigurationError
from times_table_trainer.core.ports import PromptPools, TemplateSourcePort


class JsonPromptSource(TemplateSourcePort):
    """Load ``{locale: {category: [template, ...]}}`` from a UTF-8 JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load_pools(self) -> PromptPools:
        try:
            with open(self.path, encoding="utf-8") as prompts_file:
                data: Any = json.load(prompts_file)
        except FileNotFoundError as exc:
            raise PromptConfigurationError(f"prompt file not found: {self.path}") from exc
        except json.JSONDecodeError as exc:
            raise PromptConfigurationError(f"prompt file is not valid JSON: {self.path}") from exc
        if not isinstance(data, dict):
            raise PromptConfigurationError(f"prompt file must contain an object: {self.path}")
        return data


__all__ = ["JsonPromptSource"]
