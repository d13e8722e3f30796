"""
Custom block definition directory.

The directory maps definition ids to :class:`CustomBlockDefinition` objects.
It is an ordinary object passed to whoever needs it (editing operations, the
validator, the renderer, the exporter) rather than a module-level registry, so
tests and embedding applications can work with isolated directories.

Registration is append-only: registering an id twice raises
:class:`DuplicateDefinitionError`, which keeps a definition's semantics stable
for the lifetime of the directory. Subscribers receive the full sorted list
immediately on subscription and again after every registration.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from blockmail.core.contracts.custom import CustomBlockDefinition
from blockmail.core.settings import get_logger

Subscriber = Callable[[list[CustomBlockDefinition]], None]

_log = get_logger("blockmail.custom")


class DuplicateDefinitionError(ValueError):
    """Raised when a definition id is already registered."""

    def __init__(self, definition_id: str) -> None:
        super().__init__(f'Custom block definition with id "{definition_id}" already exists')
        self.definition_id = definition_id


class DefinitionDirectory:
    """In-memory directory of custom block definitions with change subscription."""

    __slots__ = ("_definitions", "_subscribers")

    def __init__(self, definitions: list[CustomBlockDefinition] | None = None) -> None:
        self._definitions: dict[str, CustomBlockDefinition] = {}
        self._subscribers: list[Subscriber] = []
        for definition in definitions or ():
            self.register(definition)

    # ------------------------------- Lookup ---------------------------------

    def lookup(self, definition_id: str) -> CustomBlockDefinition | None:
        """Return the definition registered under ``definition_id``, if any."""
        return self._definitions.get(definition_id)

    def list_all(self) -> list[CustomBlockDefinition]:
        """Return every definition sorted by display name (case-insensitive)."""
        return sorted(
            self._definitions.values(),
            key=lambda d: (d.display_name.casefold(), d.display_name),
        )

    def __contains__(self, definition_id: object) -> bool:
        return definition_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[CustomBlockDefinition]:
        return iter(self.list_all())

    # ----------------------------- Mutation ---------------------------------

    def register(self, definition: CustomBlockDefinition) -> None:
        """Add ``definition`` and notify subscribers.

        Raises
        ------
        DuplicateDefinitionError
            If a definition with the same id is already registered.
        """
        if definition.id in self._definitions:
            raise DuplicateDefinitionError(definition.id)
        self._definitions[definition.id] = definition
        _log.debug("Registered custom block definition %s", definition.id)
        self._notify()

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Call ``subscriber`` now and after every change; return an unsubscribe hook."""
        self._subscribers.append(subscriber)
        subscriber(self.list_all())

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.list_all()
        for subscriber in list(self._subscribers):
            subscriber(list(snapshot))


__all__ = ["DefinitionDirectory", "DuplicateDefinitionError", "Subscriber"]
