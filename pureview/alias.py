"""
Username aliases for Pureview.

An alias names an ordered group of GitHub usernames so a whole team can be
queried with a single argument. The map is kept as a JSON string under the
"aliases" config key.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable

from .config import ALIASES_KEY, ConfigStore

logger = logging.getLogger(__name__)


def _is_member_list(value: object) -> bool:
    return isinstance(value, list) and all(isinstance(member, str) for member in value)


class AliasResolver:
    """Loads the alias map once and writes it back after every change."""

    def __init__(self, store: ConfigStore):
        self.store = store
        self._aliases: dict[str, list[str]] = self._load()

    def _load(self) -> dict[str, list[str]]:
        raw = self.store.get(ALIASES_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed aliases in %s", self.store.path)
            return {}
        if not isinstance(data, dict) or not all(_is_member_list(m) for m in data.values()):
            logger.warning("Ignoring malformed aliases in %s", self.store.path)
            return {}
        return {name: list(members) for name, members in data.items()}

    def _save(self) -> None:
        self.store.set(ALIASES_KEY, json.dumps(self._aliases))

    def get_alias(self, name: str | None = None) -> list[str] | dict[str, list[str]]:
        """
        Look up an alias.

        Args:
            name: Alias to look up. When omitted the whole map is returned.

        Returns:
            The member usernames (empty list if the alias is unknown), or a
            copy of the whole alias map.
        """
        if name is None:
            return {key: list(members) for key, members in self._aliases.items()}
        return list(self._aliases.get(name, []))

    def set_alias(self, name: str, usernames: Iterable[str]) -> None:
        self._aliases[name] = list(usernames)
        self._save()

    def delete_alias(self, name: str | None = None) -> None:
        """Remove one alias, or every alias when name is omitted."""
        if name is None:
            self._aliases = {}
        else:
            self._aliases.pop(name, None)
        self._save()

    def expand(self, tokens: Iterable[str]) -> list[str]:
        """Replace alias names with their members, keeping everything else as-is."""
        usernames: list[str] = []
        for token in tokens:
            members = self._aliases.get(token)
            if members:
                usernames.extend(members)
            else:
                usernames.append(token)
        return usernames
