"""In-memory directory provider, loadable from a JSON export."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from shareseed.core.exceptions import ConfigurationError


class StaticDirectoryProvider:
    """DirectoryProvider over a fixed group -> members mapping.

    Stands in for a live directory service when the group membership was
    exported ahead of time, and in tests.

    A groups file looks like:

        {
            "domain": "CORP",
            "groups": {"Finance": ["alice", "bob"], "HR": ["carol"]}
        }

    A bare {"Finance": [...]} mapping is accepted too.
    """

    def __init__(
        self, groups: Mapping[str, list[str]], domain: str | None = None
    ) -> None:
        self._groups = {k: list(v) for k, v in groups.items()}
        self._domain = domain

    @classmethod
    def from_json(cls, path: Path) -> StaticDirectoryProvider:
        """Load a groups file.

        Raises:
            ConfigurationError: If the file is missing or malformed.
        """
        try:
            with path.open() as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Groups file not found: {path}", field="groups") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Groups file {path} is not valid JSON: {e.msg} (line {e.lineno})",
                field="groups",
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Groups file {path} must contain a JSON object", field="groups"
            )
        if "groups" in data:
            domain, groups = data.get("domain"), data["groups"]
        else:
            domain, groups = None, data

        if not isinstance(groups, dict) or not all(
            isinstance(m, list) and all(isinstance(x, str) for x in m)
            for m in groups.values()
        ):
            raise ConfigurationError(
                f"Groups in {path} must map names to lists of strings", field="groups"
            )
        return cls(groups, domain=domain)

    def fetch_group(self, key: str) -> list[str]:
        """Return the members of a group, matching the key case-insensitively.

        Raises:
            KeyError: If the group does not exist.
        """
        if key in self._groups:
            return list(self._groups[key])
        folded = key.casefold()
        for name, members in self._groups.items():
            if name.casefold() == folded:
                return list(members)
        raise KeyError(key)

    def list_groups(self) -> list[str]:
        """Return every group name."""
        return sorted(self._groups)

    def current_domain(self) -> str | None:
        """Return the domain from the groups file, if any."""
        return self._domain
