"""Priority-ordered registry mapping Git hooks to action references.

Two types share one shape (``hook -> priority -> [ActionReference, ...]``):

* :class:`RegistryBuilder` — mutable, built once per install run.
* :class:`Registry` — immutable snapshot read by every dispatch.

Priorities iterate in ascending order; references keep insertion order
within a priority. Nothing is deduplicated.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel

from hookctl.domain.hooks import is_supported, supported_hooks
from hookctl.errors import ConfigurationError

DEFAULT_PRIORITY = 10
REFERENCE_SEPARATOR = "::"


class ActionReference(BaseModel):
    """One registered unit of behavior: an action key plus a method name."""

    model_config = {"frozen": True}

    action: str
    method: str = "run"
    priority: int = DEFAULT_PRIORITY

    def __str__(self) -> str:
        return f"{self.action}{REFERENCE_SEPARATOR}{self.method}"

    @classmethod
    def parse(cls, text: str, priority: int = DEFAULT_PRIORITY) -> ActionReference:
        """Parse an ``"action::method"`` reference.

        Raises:
            ConfigurationError: If the text does not split into exactly two
                non-empty parts.
        """
        parts = text.strip().split(REFERENCE_SEPARATOR)
        if len(parts) != 2 or not all(part.strip() for part in parts):
            msg = f"Could not parse action reference {text!r}, expected 'action::method'"
            raise ConfigurationError(msg)
        action, method = (part.strip() for part in parts)
        return cls(action=action, method=method, priority=priority)


def parse_prioritized_hook(key: str) -> tuple[str, int]:
    """Split a metadata key of the form ``"<priority>.<hook>"`` or ``"<hook>"``.

    Examples:
        >>> parse_prioritized_hook("5.pre-commit")
        ('pre-commit', 5)
        >>> parse_prioritized_hook("commit-msg")
        ('commit-msg', 10)
    """
    head, sep, tail = key.partition(".")
    if not sep:
        return key.strip(), DEFAULT_PRIORITY
    try:
        priority = int(head)
    except ValueError:
        msg = f"Invalid priority {head!r} in hook key {key!r}"
        raise ConfigurationError(msg) from None
    return tail.strip(), priority


def _coerce_reference(action_ref: ActionReference | str, priority: int) -> ActionReference:
    if isinstance(action_ref, ActionReference):
        if action_ref.priority == priority:
            return action_ref
        return action_ref.model_copy(update={"priority": priority})
    return ActionReference.parse(action_ref, priority=priority)


class RegistryBuilder:
    """Mutable registry used while collecting entries at install time."""

    def __init__(self) -> None:
        self._entries: dict[str, dict[int, list[ActionReference]]] = {}

    def add_entry(
        self,
        hook: str,
        action_ref: ActionReference | str,
        priority: int = DEFAULT_PRIORITY,
    ) -> ActionReference:
        """Append *action_ref* to the ``[hook][priority]`` bucket.

        Raises:
            ConfigurationError: For an unsupported hook or malformed reference.
        """
        if not is_supported(hook):
            msg = f"Unknown Git hook {hook!r}"
            raise ConfigurationError(msg)
        ref = _coerce_reference(action_ref, priority)
        buckets = self._entries.setdefault(str(hook), {})
        buckets.setdefault(priority, []).append(ref)
        self._entries[str(hook)] = dict(sorted(buckets.items()))
        return ref

    def get_entries(self, hook: str) -> dict[int, list[ActionReference]]:
        """Return ``priority -> references`` for *hook*, or ``{}``."""
        buckets = self._entries.get(hook)
        if not buckets:
            return {}
        return {priority: list(refs) for priority, refs in buckets.items()}

    def build(self) -> Registry:
        """Freeze the current entries into a :class:`Registry` snapshot."""
        return Registry(self._entries)


class Registry:
    """Immutable registry snapshot, loaded fresh by every dispatch."""

    def __init__(
        self,
        entries: Mapping[str, Mapping[int, Sequence[ActionReference]]] | None = None,
    ) -> None:
        frozen: dict[str, Mapping[int, tuple[ActionReference, ...]]] = {}
        for hook, buckets in (entries or {}).items():
            ordered = {
                int(priority): tuple(refs) for priority, refs in sorted(buckets.items()) if refs
            }
            if ordered:
                frozen[hook] = MappingProxyType(ordered)
        self._entries = MappingProxyType(frozen)

    def get_entries(self, hook: str) -> dict[int, list[ActionReference]]:
        """Return ``priority -> references`` for *hook*, or ``{}``. Never fails."""
        buckets = self._entries.get(hook)
        if buckets is None:
            return {}
        return {priority: list(refs) for priority, refs in buckets.items()}

    def iter_entries(self, hook: str) -> Iterator[ActionReference]:
        """Yield references for *hook* in dispatch order."""
        for refs in self._entries.get(hook, {}).values():
            yield from refs

    def hooks(self) -> list[str]:
        """Hooks that have at least one entry."""
        return list(self._entries)

    def __len__(self) -> int:
        return sum(len(refs) for buckets in self._entries.values() for refs in buckets.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return self.to_mapping() == other.to_mapping()

    def to_mapping(self) -> dict[str, dict[int, list[str]]]:
        """Serializable form covering every supported hook, empty ones included."""
        mapping: dict[str, dict[int, list[str]]] = {}
        for hook in supported_hooks():
            mapping[hook] = {
                priority: [str(ref) for ref in refs]
                for priority, refs in self._entries.get(hook, {}).items()
            }
        return mapping

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Registry:
        """Rebuild a snapshot from :meth:`to_mapping` output.

        Raises:
            ConfigurationError: If the shape or any reference is malformed.
        """
        builder = RegistryBuilder()
        for hook, buckets in data.items():
            if not isinstance(buckets, Mapping):
                msg = f"Entries for hook {hook!r} must be a mapping"
                raise ConfigurationError(msg)
            for priority, refs in buckets.items():
                if isinstance(refs, str) or not isinstance(refs, Sequence):
                    msg = f"Entries for {hook!r} at priority {priority!r} must be a list"
                    raise ConfigurationError(msg)
                try:
                    level = int(priority)
                except (TypeError, ValueError):
                    msg = f"Invalid priority {priority!r} for hook {hook!r}"
                    raise ConfigurationError(msg) from None
                for ref in refs:
                    if not isinstance(ref, str):
                        msg = f"Action reference {ref!r} must be a string"
                        raise ConfigurationError(msg)
                    builder.add_entry(hook, ref, level)
        return builder.build()
