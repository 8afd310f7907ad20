"""Markup lexer built on lxml's parser-target interface.

The lexer turns markup text into a flat list of StartElement / EndElement /
Characters events. lxml guarantees well-formed tag nesting, so every EndElement
matches the innermost open StartElement.
"""

from typing import Dict, List, Optional, Union

from lxml import etree

from polyform.shared.errors import MarkupError
from polyform.shared.logging import get_logger

from .events import Characters, EndElement, MarkupEvent, StartElement


def local_name(name: str) -> str:
    """Strip a ``{namespace}`` prefix from an lxml tag or attribute name."""
    if name.startswith("{"):
        return name.split("}", 1)[1]
    return name


class _EventCollector:
    """lxml parser target recording events in document order."""

    def __init__(self) -> None:
        self.events: List[MarkupEvent] = []

    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        attributes = tuple(
            (local_name(key), value) for key, value in attrib.items()
        )
        self.events.append(StartElement(local_name(tag), attributes))

    def end(self, tag: str) -> None:
        self.events.append(EndElement(local_name(tag)))

    def data(self, text: str) -> None:
        self.events.append(Characters(text))

    def close(self) -> List[MarkupEvent]:
        return self.events


def read_events(
    markup: Union[str, bytes], correlation_id: Optional[str] = None
) -> List[MarkupEvent]:
    """Lex markup text into events.

    Args:
        markup: Markup document as text or encoded bytes
        correlation_id: Optional correlation ID for log messages

    Returns:
        Events in document order

    Raises:
        MarkupError: If the markup is not well-formed
    """
    logger = get_logger(__name__, correlation_id, "markup_lexer")
    # lxml refuses str input that carries an encoding declaration
    data = markup.encode("utf-8") if isinstance(markup, str) else markup

    # Only internal entities are resolved; external ones and network access stay off
    parser = etree.XMLParser(target=_EventCollector(), no_network=True)
    try:
        events: List[MarkupEvent] = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        line, column = getattr(e, "position", (None, None))
        logger.debug(
            "Markup is not well-formed",
            extra={"error": str(e), "line": line, "column": column},
        )
        raise MarkupError(f"Malformed markup: {e.msg}", line, column) from e

    logger.debug("Markup lexed", extra={"event_count": len(events)})
    return events
