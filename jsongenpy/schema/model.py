"""Schema model handed to the code emitter."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Final, Mapping

from jsongenpy.text import Position


class FieldType(StrEnum):
    BOOL = "bool"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    SSTRING = "sstring"
    NESTED_STRUCT = "struct"


BUILTIN_TYPE_NAMES: Final[Mapping[str, FieldType]] = MappingProxyType(
    {
        "bool": FieldType.BOOL,
        "int": FieldType.INT,
        "long": FieldType.LONG,
        "float": FieldType.FLOAT,
        "double": FieldType.DOUBLE,
        "sstring": FieldType.SSTRING,
        "sstr_t": FieldType.SSTRING,
    }
)
"""Type keywords accepted in field position (`sstr_t` is the C spelling)."""

STRUCT_KEYWORD: Final[str] = "struct"


@dataclass(frozen=True, slots=True)
class Field:
    """One named member of a struct.

    `array_width` is None for scalars, the declared width for fixed arrays,
    and 0 for unsized arrays (only produced when the parser allows them).
    """

    name: str
    type: FieldType
    nested_struct_name: str | None = None
    array_width: int | None = None
    position: Position | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if (self.type == FieldType.NESTED_STRUCT) != (self.nested_struct_name is not None):
            raise ValueError(
                f"Field {self.name!r}: nested_struct_name must be set exactly when type is NESTED_STRUCT"
            )
        if self.array_width is not None and self.array_width < 0:
            raise ValueError(f"Field {self.name!r}: array width cannot be negative")

    @property
    def is_array(self) -> bool:
        return self.array_width is not None

    @property
    def type_name(self) -> str:
        """Name of the field's type as written in schema source."""
        if self.nested_struct_name is not None:
            return self.nested_struct_name
        return self.type.value


@dataclass(frozen=True, slots=True)
class StructContainer:
    """One `struct Name { ... };` definition with fields in declaration order."""

    name: str
    fields: tuple[Field, ...] = ()
    position: Position | None = field(default=None, compare=False)

    def get_field(self, name: str) -> Field | None:
        for item in self.fields:
            if item.name == name:
                return item
        return None

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(item.name for item in self.fields)

    @property
    def nested_struct_names(self) -> tuple[str, ...]:
        """Distinct struct names referenced by this container, in field order."""
        seen: dict[str, None] = {}
        for item in self.fields:
            if item.nested_struct_name is not None:
                seen.setdefault(item.nested_struct_name, None)
        return tuple(seen)


class StructContainerBuilder:
    """Collects fields while a struct declaration is being parsed."""

    def __init__(self, name: str, position: Position | None = None) -> None:
        self.name = name
        self.position = position
        self._fields: list[Field] = []
        self._names: set[str] = set()

    def has_field(self, name: str) -> bool:
        return name in self._names

    def add(self, item: Field) -> None:
        if item.name in self._names:
            raise ValueError(f"Field {item.name!r} already defined on {self.name!r}")
        self._names.add(item.name)
        self._fields.append(item)

    def freeze(self) -> StructContainer:
        return StructContainer(name=self.name, fields=tuple(self._fields), position=self.position)


@dataclass(frozen=True, slots=True)
class SchemaModel:
    """All struct definitions of one schema, in declaration order."""

    structs: tuple[StructContainer, ...] = ()

    def __iter__(self) -> Iterator[StructContainer]:
        return iter(self.structs)

    def __len__(self) -> int:
        return len(self.structs)

    def __contains__(self, name: object) -> bool:
        return any(container.name == name for container in self.structs)

    def __getitem__(self, name: str) -> StructContainer:
        container = self.get(name)
        if container is None:
            raise KeyError(name)
        return container

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(container.name for container in self.structs)

    def get(self, name: str) -> StructContainer | None:
        for container in self.structs:
            if container.name == name:
                return container
        return None

    def dependency_order(self) -> tuple[StructContainer, ...]:
        """Order structs so every embedded struct precedes its users.

        Declaration order is kept wherever it already satisfies that. A
        struct referencing itself is allowed; longer cycles raise ValueError.
        """
        by_name = {container.name: container for container in self.structs}
        ordered: list[StructContainer] = []
        done: set[str] = set()
        visiting: list[str] = []

        def visit(container: StructContainer) -> None:
            if container.name in done:
                return
            if container.name in visiting:
                cycle = " -> ".join([*visiting[visiting.index(container.name) :], container.name])
                raise ValueError(f"Struct dependency cycle: {cycle}")
            visiting.append(container.name)
            for dependency in container.nested_struct_names:
                if dependency != container.name and dependency in by_name:
                    visit(by_name[dependency])
            visiting.pop()
            done.add(container.name)
            ordered.append(container)

        for container in self.structs:
            visit(container)
        return tuple(ordered)
