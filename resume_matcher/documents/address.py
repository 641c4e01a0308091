"""Typed field addresses inside a resume entity.

A suggestion's ``field`` string is parsed once into one of:

- ``ScalarField("description")``: a text attribute
- ``ArrayIndexField("highlights", 2)``: one slot of a list of text
"""

import re
from dataclasses import dataclass

_ARRAY_INDEX_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\.(\d+)$")


@dataclass(frozen=True)
class ScalarField:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ArrayIndexField:
    name: str
    index: int

    def __str__(self) -> str:
        return f"{self.name}.{self.index}"


FieldAddress = ScalarField | ArrayIndexField


def parse_field_address(field: str) -> FieldAddress:
    """Parse a dotted field path.

    ``"highlights.2"`` becomes an array slot; anything else is taken as a
    scalar attribute name. Unknown names are not an error here, they simply
    never resolve when a patch is applied.
    """
    match = _ARRAY_INDEX_PATTERN.match(field)
    if match:
        return ArrayIndexField(name=match.group(1), index=int(match.group(2)))
    return ScalarField(name=field)
