"""Form markup tokenizer.

This module converts a stream of markup events into a flat sequence of
form-level tokens. Tokenization runs once per document; the resulting
TokenStream is immutable and is re-walked by the tree builder once per
language variant.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple
from xml.sax.saxutils import escape

from polyform.markup.events import (
    Attributes,
    Characters,
    EndElement,
    MarkupEvent,
    StartElement,
)
from polyform.shared.config import TokenizerConfig
from polyform.shared.logging import get_logger

# Index values are 16-bit; anything unparseable sorts last
INDEX_MAX = 0xFFFF

_ATTRIBUTE_ESCAPES = {'"': "&quot;"}


class TokenType(Enum):
    """Form token types emitted by the tokenizer."""

    # Language-bearing text tokens
    CATEGORY = auto()
    DESCRIPTION = auto()
    DIR_DESCRIPTION = auto()
    META_DESCRIPTION = auto()
    TITLE = auto()
    LABEL = auto()
    KEYWORDS = auto()
    INSTRUCTIONS = auto()

    # Text trailing directly inside a container
    IMPLICIT_LABEL = auto()

    # Document-level text tokens without language
    LINK = auto()
    SCRIPT = auto()
    STYLE = auto()
    INDEX = auto()
    UNLISTED = auto()

    # Containers
    SECTION_START = auto()
    SECTION_END = auto()
    GROUP_START = auto()
    GROUP_END = auto()
    FIELD_START = auto()
    FIELD_END = auto()
    OPTION_START = auto()
    OPTION_END = auto()


class TokenizerState(Enum):
    """Event dispatch modes."""

    NORMAL = auto()             # Structural interpretation of events
    CAPTURING_VERBATIM = auto() # Serializing events back to markup text


# Elements whose text may be restricted to one language with a lang attribute
LANGUAGE_ELEMENTS = {
    "category": TokenType.CATEGORY,
    "description": TokenType.DESCRIPTION,
    "dir-description": TokenType.DIR_DESCRIPTION,
    "meta-description": TokenType.META_DESCRIPTION,
    "title": TokenType.TITLE,
    "label": TokenType.LABEL,
    "keywords": TokenType.KEYWORDS,
    "instructions": TokenType.INSTRUCTIONS,
}

PLAIN_TEXT_ELEMENTS = {
    "link": TokenType.LINK,
    "script": TokenType.SCRIPT,
    "style": TokenType.STYLE,
    "index": TokenType.INDEX,
}

CONTAINER_ELEMENTS = {
    "section": (TokenType.SECTION_START, TokenType.SECTION_END),
    "group": (TokenType.GROUP_START, TokenType.GROUP_END),
    "field": (TokenType.FIELD_START, TokenType.FIELD_END),
    "option": (TokenType.OPTION_START, TokenType.OPTION_END),
}

TEXT_TOKEN_TYPES = frozenset(LANGUAGE_ELEMENTS.values()) | frozenset(
    {TokenType.LINK, TokenType.SCRIPT, TokenType.STYLE, TokenType.IMPLICIT_LABEL}
)


@dataclass(frozen=True)
class Token:
    """A single form token.

    ``lang`` is None when the token applies under every target language.
    ``inherited_language`` marks a ``lang`` taken from the document default
    rather than from an explicit attribute.
    """

    type: TokenType
    text: Optional[str] = None
    lang: Optional[str] = None
    attributes: Attributes = ()
    number: Optional[int] = None
    inherited_language: bool = False

    def __post_init__(self) -> None:
        """Validate token payload against its type."""
        if self.type in TEXT_TOKEN_TYPES and self.text is None:
            raise ValueError(f"{self.type.name} token requires text")
        if self.type is TokenType.INDEX and self.number is None:
            raise ValueError("INDEX token requires a number")
        if self.inherited_language and self.lang is None:
            raise ValueError("Inherited language requires a lang value")

    @property
    def is_container_start(self) -> bool:
        return self.type in _START_TYPES

    @property
    def is_container_end(self) -> bool:
        return self.type in _END_TYPES

    def get_attribute(self, name: str) -> Optional[str]:
        """Return the value of the first raw attribute called ``name``."""
        return next((value for key, value in self.attributes if key == name), None)


_START_TYPES = frozenset(start for start, _ in CONTAINER_ELEMENTS.values())
_END_TYPES = frozenset(end for _, end in CONTAINER_ELEMENTS.values())


@dataclass(frozen=True)
class TokenStream:
    """Result of tokenizing one document.

    Attributes:
        tokens: Ordered, immutable token sequence
        language: Declared default language, if any
        alternates: Additional languages to produce variants for, in order
    """

    tokens: Tuple[Token, ...] = ()
    language: Optional[str] = None
    alternates: Tuple[str, ...] = ()

    @property
    def variant_languages(self) -> List[Optional[str]]:
        """Target languages in output order: default first, then alternates."""
        return [self.language, *self.alternates]

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass
class _VerbatimCapture:
    """Sub-state of CAPTURING_VERBATIM: serialized text and nesting depth."""

    buffer: List[str] = field(default_factory=list)
    depth: int = 0


class FormTokenizer:
    """Tokenizer turning markup events into form tokens.

    Instances are single-use per call to tokenize(); state is reset at the
    start of every call.
    """

    def __init__(
        self,
        config: Optional[TokenizerConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            config: Tokenizer configuration
            correlation_id: Optional correlation ID for log messages
        """
        self.config = config or TokenizerConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "form_tokenizer")
        self._reset_state()

    def _reset_state(self) -> None:
        self.state = TokenizerState.NORMAL
        self.tokens: List[Token] = []
        self.language: Optional[str] = None
        self.alternates: List[str] = []
        self._text: List[str] = []
        self._lang: Optional[str] = None
        self._capture: Optional[_VerbatimCapture] = None

    def tokenize(self, events: Iterable[MarkupEvent]) -> TokenStream:
        """Tokenize markup events.

        Args:
            events: Markup events in document order

        Returns:
            TokenStream with tokens, default language and alternates
        """
        self._reset_state()

        for event in events:
            if self.state is TokenizerState.CAPTURING_VERBATIM:
                self._capture_event(event)
            elif isinstance(event, StartElement):
                self._on_start(event)
            elif isinstance(event, EndElement):
                self._on_end(event)
            elif isinstance(event, Characters):
                self._text.append(event.text)

        stream = TokenStream(
            tokens=tuple(self.tokens),
            language=self.language,
            alternates=tuple(self.alternates),
        )
        self.logger.debug(
            "Tokenization completed",
            extra={
                "token_count": len(stream),
                "language": stream.language,
                "alternates": list(stream.alternates),
            },
        )
        return stream

    def _on_start(self, event: StartElement) -> None:
        self._text.clear()
        name = event.name

        if name in LANGUAGE_ELEMENTS:
            self._lang = event.get_attribute("lang")
            if name == "instructions":
                self.state = TokenizerState.CAPTURING_VERBATIM
                self._capture = _VerbatimCapture()
        elif name in CONTAINER_ELEMENTS:
            start_type, _ = CONTAINER_ELEMENTS[name]
            self.tokens.append(Token(start_type, attributes=event.attributes))

    def _on_end(self, event: EndElement) -> None:
        name = event.name
        text = "".join(self._text)
        self._text.clear()

        if name in LANGUAGE_ELEMENTS:
            self._emit_text(LANGUAGE_ELEMENTS[name], text)
        elif name in PLAIN_TEXT_ELEMENTS:
            token_type = PLAIN_TEXT_ELEMENTS[name]
            if token_type is TokenType.INDEX:
                self.tokens.append(Token(token_type, number=parse_index(text)))
            else:
                self.tokens.append(Token(token_type, text=self._clean(text)))
        elif name in CONTAINER_ELEMENTS:
            implicit = text.strip()
            if implicit:
                self.tokens.append(Token(TokenType.IMPLICIT_LABEL, text=implicit))
            _, end_type = CONTAINER_ELEMENTS[name]
            self.tokens.append(Token(end_type))
        elif name == "language":
            self.language = text.strip() or None
        elif name == "alternates":
            self.alternates.extend(text.split())
        elif name == "unlisted":
            self.tokens.append(Token(TokenType.UNLISTED))
        elif self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug("Ignoring unrecognized element", extra={"element": name})

    def _emit_text(self, token_type: TokenType, text: str) -> None:
        explicit = self._lang
        self._lang = None

        inherited = False
        if explicit is None:
            lang = self.language
            inherited = lang is not None
        elif explicit == self.config.wildcard_language:
            lang = None
        else:
            lang = explicit

        self.tokens.append(
            Token(token_type, text=self._clean(text), lang=lang,
                  inherited_language=inherited)
        )

    def _capture_event(self, event: MarkupEvent) -> None:
        """Serialize one event while inside an instructions block."""
        capture = self._capture
        assert capture is not None

        if isinstance(event, Characters):
            capture.buffer.append(event.text)
        elif isinstance(event, StartElement):
            if event.name == "instructions":
                capture.depth += 1
            capture.buffer.append(serialize_start_tag(event))
        elif isinstance(event, EndElement):
            if event.name == "instructions" and capture.depth == 0:
                self.state = TokenizerState.NORMAL
                self._capture = None
                self._emit_text(TokenType.INSTRUCTIONS, "".join(capture.buffer))
                return
            if event.name == "instructions":
                capture.depth -= 1
            capture.buffer.append(f"</{event.name}>")

    def _clean(self, text: str) -> str:
        return text.strip() if self.config.strip_text else text


def serialize_start_tag(event: StartElement) -> str:
    """Render a start event back to literal markup, e.g. ``<a href="x">``."""
    attributes = "".join(
        f' {name}="{escape(value, _ATTRIBUTE_ESCAPES)}"'
        for name, value in event.attributes
    )
    return f"<{event.name}{attributes}>"


def parse_index(text: str) -> int:
    """Parse an ``index`` payload; unparseable or out-of-range text gives INDEX_MAX."""
    try:
        value = int(text.strip())
    except ValueError:
        return INDEX_MAX
    if not 0 <= value <= INDEX_MAX:
        return INDEX_MAX
    return value
