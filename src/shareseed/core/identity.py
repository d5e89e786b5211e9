"""Owner identity resolution for created files.

Maps a work item's tag (usually a department name, often spelled
inconsistently by folder-name generators) to a directory group, then to a
random member of that group. When the directory has nothing usable the
policy falls back to a group-level or generic identity, so ownership never
blocks or fails an item.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from shareseed.core.exceptions import ConfigurationError
from shareseed.core.models import ItemKind


if TYPE_CHECKING:
    from shareseed.core.directory_cache import DirectoryCache
    from shareseed.core.models import WorkItem


OwnerSource = Literal["member", "group", "fallback"]

_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_tag(tag: str) -> str:
    """Collapse separators and case so "HR_Dept", "hr-dept" and " HR  dept" match.

    Example:
        >>> normalize_tag("  Human_Resources-Team ")
        'human resources team'
    """
    return _SEPARATORS.sub(" ", tag).strip().casefold()


@dataclass(frozen=True, slots=True)
class IdentityPolicy:
    """How tags turn into owners.

    Attributes:
        group_for_tag: Explicit tag -> group key overrides. Tags are matched
            after normalize_tag().
        group_template: Group key for tags without an override; "{tag}" is
            replaced by the tag as written on the item.
        fallback_owner: Identity used when no group member is available.
        use_group_fallback: When the group is cached but empty, own the file
            by the group itself instead of fallback_owner.
        qualify_with_domain: Prefix owners with "DOMAIN\\" when the cache has
            resolved a current domain.
    """

    group_for_tag: Mapping[str, str] = field(default_factory=dict)
    group_template: str = "{tag}"
    fallback_owner: str = "Everyone"
    use_group_fallback: bool = True
    qualify_with_domain: bool = False

    def __post_init__(self) -> None:
        """Reject templates that cannot be filled from a tag alone."""
        try:
            self.group_template.format(tag="x")
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            raise ConfigurationError(
                f"Invalid group_template {self.group_template!r}: {e!r}",
                field="group_template",
            ) from e

    def group_key(self, tag: str) -> str | None:
        """Directory group key for a tag, or None for an empty tag."""
        normalized = normalize_tag(tag)
        if not normalized:
            return None
        overrides = {normalize_tag(k): v for k, v in self.group_for_tag.items()}
        if normalized in overrides:
            return overrides[normalized]
        return self.group_template.format(tag=tag.strip())


@dataclass(frozen=True, slots=True)
class OwnerAssignment:
    """Resolved owner and where it came from."""

    owner: str
    source: OwnerSource


class IdentityResolver:
    """Resolves owners from a DirectoryCache under an IdentityPolicy.

    Only reads the cache; a miss is answered with the fallback identity and
    never triggers a directory round trip.
    """

    def __init__(
        self, cache: DirectoryCache, policy: IdentityPolicy | None = None
    ) -> None:
        self._cache = cache
        self._policy = policy or IdentityPolicy()

    @property
    def policy(self) -> IdentityPolicy:
        return self._policy

    def resolve(self, tag: str) -> OwnerAssignment:
        """Pick an owner for an item carrying tag."""
        key = self._policy.group_key(tag)
        if key is None:
            return self._fallback()

        member = self._cache.resolve_random_member(key)
        if member is not None:
            return OwnerAssignment(self._qualify(member), "member")

        if self._policy.use_group_fallback and self._cache.lookup(key) is not None:
            return OwnerAssignment(self._qualify(key), "group")

        return self._fallback()

    def resolve_item(self, item: WorkItem) -> OwnerAssignment:
        """Pick an owner for a work item; clutter always gets the fallback."""
        if item.kind is ItemKind.CLUTTER:
            return self._fallback()
        return self.resolve(item.tag)

    def _fallback(self) -> OwnerAssignment:
        return OwnerAssignment(self._policy.fallback_owner, "fallback")

    def _qualify(self, name: str) -> str:
        if not self._policy.qualify_with_domain or "\\" in name:
            return name
        domain = self._cache.current_domain
        return f"{domain}\\{name}" if domain else name
