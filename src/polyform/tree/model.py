"""Document model for compiled forms.

A Form owns an ordered list of Sections; a Section owns Groups and Fields; a
Group owns Fields; a Field owns FieldOptions. There are no back references.
Containers are constructed from raw markup attributes with ``from_attributes``,
which enforces the closed attribute schema.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from polyform.shared.errors import (
    InvalidAttribute,
    InvalidFieldType,
    InvalidGroupType,
    UnnamedElement,
)
from polyform.tokenization.tokenizer import INDEX_MAX

RawAttributes = Iterable[Tuple[str, str]]


def _is_whole_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _require_name(attributes: Tuple[Tuple[str, str], ...], context: str) -> str:
    """Return the ``name`` attribute, checked before any other attribute."""
    name = next((value for key, value in attributes if key == "name"), None)
    if not name:
        raise UnnamedElement(context)
    return name


class _SerializedEnum(Enum):
    """Enum whose markup keyword is its value and whose encoded form is CamelCase."""

    @property
    def serialized_name(self) -> str:
        return self.name.title().replace("_", "")


class FieldType(_SerializedEnum):
    """Input kinds a field may have, keyed by the ``type`` attribute value."""

    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    FILE = "file"
    IMAGE = "image"
    SELECT = "select"
    MULTI_SELECT = "multi-select"
    TEXT_AREA = "textarea"
    DATE = "date"
    EMAIL = "email"
    TEL = "tel"
    URL = "url"
    GRID = "grid"

    @classmethod
    def parse(cls, value: str) -> "FieldType":
        try:
            return cls(value)
        except ValueError:
            raise InvalidFieldType(value) from None


class GroupType(_SerializedEnum):
    """Layout kinds a group may have."""

    ROW = "row"
    SUBSECTION = "subsection"

    @classmethod
    def parse(cls, value: str) -> "GroupType":
        if value == "":
            return cls.ROW
        try:
            return cls(value)
        except ValueError:
            raise InvalidGroupType(value) from None


@dataclass
class ElementAttributes:
    """Attributes shared by sections, groups, fields and options."""

    requires: Optional[str] = None
    optional: bool = False
    optional_if: Optional[str] = None
    class_: Optional[str] = None

    def apply(self, name: str, value: str, context: str) -> None:
        """Apply one shared attribute.

        Raises:
            InvalidAttribute: If ``name`` is not a shared attribute
        """
        if name == "requires":
            self.requires = value
        elif name == "optional":
            # Boolean attribute: presence means true
            self.optional = True
        elif name == "optional-if":
            self.optional_if = value
        elif name == "class":
            self.class_ = value
        else:
            raise InvalidAttribute(name, context)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requires": self.requires,
            "optional": self.optional,
            "optional_if": self.optional_if,
            "class": self.class_,
        }


@dataclass
class FieldOption:
    """One choice of a select, multi-select or grid field."""

    name: str
    label: Optional[str] = None
    attributes: ElementAttributes = field(default_factory=ElementAttributes)

    def __post_init__(self) -> None:
        if not self.name:
            raise UnnamedElement("option must have a name")

    @classmethod
    def from_attributes(cls, attributes: RawAttributes) -> "FieldOption":
        """Build an option from raw markup attributes.

        ``lang`` is accepted here; the tree builder uses it to filter options
        per language variant.
        """
        attributes = tuple(attributes)
        name = _require_name(attributes, "option must have a name")
        shared = ElementAttributes()
        for attribute_name, value in attributes:
            if attribute_name in ("name", "lang"):
                continue
            shared.apply(attribute_name, value, "option; attribute is unrecognized")

        return cls(name=name, attributes=shared)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "attributes": self.attributes.to_dict(),
        }


@dataclass
class Field:
    """A single input of the form."""

    name: str
    field_type: FieldType
    instructions: Optional[str] = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    length: int = 0
    rows: List[int] = field(default_factory=list)
    options: List[FieldOption] = field(default_factory=list)
    attributes: ElementAttributes = field(default_factory=ElementAttributes)

    def __post_init__(self) -> None:
        if not self.name:
            raise UnnamedElement("field must have a name")

    @staticmethod
    def parse_rows(value: str) -> List[int]:
        """Parse grid dimensions from a whitespace-separated list of positive integers.

        Raises:
            InvalidAttribute: If the value is blank or any entry is not a positive integer
        """
        cells = value.split()
        if not cells:
            raise InvalidAttribute(
                "rows", f"could not parse the value of rows attribute: {value}"
            )
        rows = []
        for cell in cells:
            if not _is_whole_number(cell) or not 0 < int(cell) <= INDEX_MAX:
                raise InvalidAttribute(
                    "rows", f"could not parse the value of rows attribute: {value}"
                )
            rows.append(int(cell))
        return rows

    @staticmethod
    def parse_length(value: str) -> int:
        """Parse the ``length`` attribute as a whole number."""
        text = value.strip()
        if not _is_whole_number(text) or int(text) > INDEX_MAX:
            raise InvalidAttribute("length", "field; length should be a whole number")
        return int(text)

    @classmethod
    def from_attributes(cls, attributes: RawAttributes) -> "Field":
        """Build a field from raw markup attributes.

        Raises:
            InvalidAttribute: On unknown attributes or unparseable length/rows
            InvalidFieldType: On a missing or unknown ``type``
            UnnamedElement: On a missing ``name``
        """
        attributes = tuple(attributes)
        name = _require_name(attributes, "field must have a name")
        field_type = None
        placeholder = None
        length = 0
        rows: List[int] = []
        shared = ElementAttributes()

        for attribute_name, value in attributes:
            if attribute_name == "name":
                continue
            elif attribute_name == "type":
                field_type = FieldType.parse(value)
            elif attribute_name == "placeholder":
                placeholder = value
            elif attribute_name == "rows":
                rows = cls.parse_rows(value)
            elif attribute_name == "length":
                length = cls.parse_length(value)
            else:
                shared.apply(attribute_name, value, "field; attribute is unrecognized")

        if field_type is None:
            raise InvalidFieldType("fields must have a type")

        return cls(
            name=name,
            field_type=field_type,
            placeholder=placeholder,
            length=length,
            rows=rows,
            attributes=shared,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "field_type": self.field_type.serialized_name,
            "instructions": self.instructions,
            "label": self.label,
            "length": self.length,
            "placeholder": self.placeholder,
            "attributes": self.attributes.to_dict(),
            "rows": list(self.rows),
            "options": [option.to_dict() for option in self.options],
        }


@dataclass
class Group:
    """A row or subsection of fields inside a section.

    Unlike the other containers, a group's name is optional.
    """

    name: str = ""
    group_type: GroupType = GroupType.ROW
    title: Optional[str] = None
    instructions: Optional[str] = None
    members: List[Field] = field(default_factory=list)
    attributes: ElementAttributes = field(default_factory=ElementAttributes)

    @classmethod
    def from_attributes(cls, attributes: RawAttributes) -> "Group":
        name = ""
        group_type = GroupType.ROW
        shared = ElementAttributes()

        for attribute_name, value in attributes:
            if attribute_name == "name":
                name = value
            elif attribute_name == "type":
                group_type = GroupType.parse(value)
            else:
                shared.apply(attribute_name, value, "group; attribute is unrecognized")

        return cls(name=name, group_type=group_type, attributes=shared)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "instructions": self.instructions,
            "members": [member.to_dict() for member in self.members],
            "group_type": self.group_type.serialized_name,
            "attributes": self.attributes.to_dict(),
        }


FormElement = Union[Group, Field]


def element_to_dict(element: FormElement) -> Dict[str, Any]:
    """Encode a section element tagged with its kind."""
    return {type(element).__name__: element.to_dict()}


@dataclass
class Section:
    """A named section of the form holding groups and fields in order."""

    name: str
    title: Optional[str] = None
    instructions: Optional[str] = None
    elements: List[FormElement] = field(default_factory=list)
    attributes: ElementAttributes = field(default_factory=ElementAttributes)

    def __post_init__(self) -> None:
        if not self.name:
            raise UnnamedElement("section must have a name")

    @classmethod
    def from_attributes(cls, attributes: RawAttributes) -> "Section":
        attributes = tuple(attributes)
        name = _require_name(attributes, "section must have a name")
        shared = ElementAttributes()

        for attribute_name, value in attributes:
            if attribute_name != "name":
                shared.apply(attribute_name, value, "section; attribute is unrecognized")

        return cls(name=name, attributes=shared)

    @property
    def fields(self) -> List[Field]:
        """All fields of the section in document order, including grouped ones."""
        result: List[Field] = []
        for element in self.elements:
            if isinstance(element, Group):
                result.extend(element.members)
            else:
                result.append(element)
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "instructions": self.instructions,
            "elements": [element_to_dict(element) for element in self.elements],
            "attributes": self.attributes.to_dict(),
        }


@dataclass
class Form:
    """Root of a compiled form, one per language variant."""

    title: Optional[str] = None
    unlisted: bool = False
    description: Optional[str] = None
    meta_description: Optional[str] = None
    dir_description: Optional[str] = None
    embedded_scripts: List[str] = field(default_factory=list)
    category: Optional[str] = None
    instructions: Optional[str] = None
    link: Optional[str] = None
    index: int = INDEX_MAX
    stylesheet: Optional[str] = None
    keywords: Optional[str] = None
    language: Optional[str] = None
    sections: List[Section] = field(default_factory=list)

    def find_section(self, name: str) -> Optional[Section]:
        """Find the first section called ``name``."""
        return next((section for section in self.sections if section.name == name), None)

    def find_field(self, name: str) -> Optional[Field]:
        """Find the first field called ``name`` in any section."""
        for section in self.sections:
            for form_field in section.fields:
                if form_field.name == name:
                    return form_field
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the form to a plain dictionary, field for field."""
        return {
            "title": self.title,
            "unlisted": self.unlisted,
            "description": self.description,
            "meta_description": self.meta_description,
            "dir_description": self.dir_description,
            "embedded_scripts": list(self.embedded_scripts),
            "category": self.category,
            "instructions": self.instructions,
            "link": self.link,
            "index": self.index,
            "stylesheet": self.stylesheet,
            "sections": [section.to_dict() for section in self.sections],
            "language": self.language,
            "keywords": self.keywords,
        }
