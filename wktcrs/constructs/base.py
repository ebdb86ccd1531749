"""Shared plumbing for the frozen CRS model classes.

The mixins here carry no fields; they only add presence predicates on top of
the fields the dataclasses declare.
"""

from __future__ import annotations

from typing import Optional, Tuple

from wktcrs.constructs.identifier import Identifier


def freeze(instance, *field_names: str):
    """
    Turn list-like fields of a frozen dataclass into tuples in place.

    None stays None so that an absent collection is not confused with an
    empty one.
    """
    for field_name in field_names:
        value = getattr(instance, field_name)
        if value is not None and not isinstance(value, tuple):
            object.__setattr__(instance, field_name, tuple(value))


class Identifiable:
    """Adds identifier predicates to a model class with an `identifiers` field."""

    identifiers: Optional[Tuple[Identifier, ...]]

    def has_identifiers(self) -> bool:
        return self.identifiers is not None

    def identifier(self, authority: str) -> Optional[Identifier]:
        """
        The first identifier issued by the given authority.

        Args:
            authority: The authority name, compared case insensitively

        Returns:
            The identifier, or None if there is none from that authority
        """
        for ident in self.identifiers or ():
            if ident.authority.upper() == authority.upper():
                return ident
        return None


class ObjectUsage(Identifiable):
    """
    Adds usage, remark and extension predicates to the top level model classes.

    The classes using it declare `usages`, `identifiers`, `remark` and
    `extensions` fields.
    """

    usages: Optional[Tuple]
    remark: Optional[str]
    extensions: Optional[Tuple[Tuple[str, str], ...]]

    def has_usages(self) -> bool:
        return self.usages is not None

    def has_remark(self) -> bool:
        return self.remark is not None

    def has_extensions(self) -> bool:
        return self.extensions is not None

    def extension(self, name: str) -> Optional[str]:
        """The value of a legacy EXTENSION passthrough, looked up by name."""
        for key, value in self.extensions or ():
            if key.upper() == name.upper():
                return value
        return None
