import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

import config
from enums.app_entity import AppEntity

L10N_DIR = Path(__file__).resolve().parent.parent / "l10n"


@lru_cache(maxsize=None)
def _load(language: str) -> dict:
    with open(L10N_DIR / f"{language}.json", "r", encoding="UTF-8") as f:
        return json.loads(f.read())


class Localizator:

    @staticmethod
    def get_text(entity: AppEntity, key: str, lang: Optional[str] = None) -> str:
        """
        Get localized text for given entity and key.

        Args:
            entity: Entity type (CUSTOMER, EMPLOYEE, COMMON)
            key: Localization key
            lang: Optional language code. If None, uses config.LANGUAGE.

        Returns:
            Localized text string

        Keys missing from the entity section are looked up in "common".
        """
        language = lang if lang is not None else config.LANGUAGE
        data = _load(language)
        if entity == AppEntity.CUSTOMER:
            section = data["customer"]
        elif entity == AppEntity.EMPLOYEE:
            section = data["employee"]
        else:
            section = data["common"]
        if key in section:
            return section[key]
        return data["common"][key]

    @staticmethod
    def format_text(entity: AppEntity, key: str, lang: Optional[str] = None, **params) -> str:
        return Localizator.get_text(entity, key, lang).format(**params)
