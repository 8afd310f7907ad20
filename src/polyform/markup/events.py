"""Markup event types produced by the lexer and consumed by the tokenizer."""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

Attributes = Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class StartElement:
    """Opening tag with its attributes in document order."""

    name: str
    attributes: Attributes = ()

    def get_attribute(self, name: str) -> Optional[str]:
        """Return the value of the first attribute called ``name``."""
        return next((value for key, value in self.attributes if key == name), None)


@dataclass(frozen=True)
class EndElement:
    """Closing tag."""

    name: str


@dataclass(frozen=True)
class Characters:
    """A run of character data. One element may yield several runs."""

    text: str


MarkupEvent = Union[StartElement, EndElement, Characters]
