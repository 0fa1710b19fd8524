"""XML event stream adapter.

Turns a schema document into ``StartElement``/``Characters`` events in
document order. Parsing goes through defusedxml so that entity expansion and
external references in untrusted schema files are refused.
"""

from collections.abc import Iterator
import io
from pathlib import Path
from typing import BinaryIO, TextIO
import xml.etree.ElementTree as ET

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser

from ..core.events import Characters, SchemaEvent, StartElement
from .errors import SchemaViolation, ValidationError, ViolationType

XmlSource = str | Path | bytes | BinaryIO | TextIO

_CHUNK_SIZE = 16 * 1024


def local_name(name: str) -> str:
    """Strip a ``{namespace}`` prefix from a tag or attribute name."""
    if name.startswith("{"):
        return name.rsplit("}", 1)[-1]
    return name


class _OpenElement:
    __slots__ = ("text", "collecting")

    def __init__(self) -> None:
        self.text: list[str] = []
        self.collecting = True


class _EventCollector:
    """Parser target recording schema events as expat reports them.

    Positions are read from the expat parser inside the start callback,
    the only moment they describe the start tag itself.
    """

    def __init__(self) -> None:
        self.parser: DefusedXMLParser | None = None
        self.events: list[SchemaEvent] = []
        self._open: list[_OpenElement] = []

    def start(self, tag: str, attrib: dict[str, str]) -> None:
        if self._open:
            # Only text before the first child belongs to the parent
            self._open[-1].collecting = False
        self._open.append(_OpenElement())

        expat = self.parser.parser if self.parser is not None else None
        self.events.append(
            StartElement(
                tag=local_name(tag),
                attributes=tuple((local_name(key), value) for key, value in attrib.items()),
                line=expat.CurrentLineNumber if expat else None,
                column=expat.CurrentColumnNumber + 1 if expat else None,
            )
        )

    def data(self, text: str) -> None:
        if self._open and self._open[-1].collecting:
            self._open[-1].text.append(text)

    def end(self, tag: str) -> None:
        text = "".join(self._open.pop().text)
        if text.strip():
            self.events.append(Characters(text))

    def close(self) -> None:
        return None

    def drain(self) -> list[SchemaEvent]:
        events, self.events = self.events, []
        return events


def _parse_stream(stream: BinaryIO | TextIO) -> Iterator[SchemaEvent]:
    collector = _EventCollector()
    parser = DefusedXMLParser(target=collector)
    collector.parser = parser

    try:
        while True:
            data = stream.read(_CHUNK_SIZE)
            if not data:
                break
            parser.feed(data)
            yield from collector.drain()
        parser.close()
        yield from collector.drain()
    except ET.ParseError as e:
        # Elements read before the error are still checked, in document order
        yield from collector.drain()
        line, offset = getattr(e, "position", (None, None))
        raise SchemaViolation(
            ValidationError(
                type=ViolationType.XML_SYNTAX_ERROR,
                message=f"Invalid XML syntax: {e}",
                line=line,
                column=offset + 1 if offset is not None else None,
                help="Ensure the file contains well-formed XML",
            )
        ) from e
    except DefusedXmlException as e:
        yield from collector.drain()
        raise SchemaViolation(
            ValidationError(
                type=ViolationType.FORBIDDEN_XML_CONSTRUCT,
                message=f"Refused to parse XML: {e}",
                help="Entity declarations and external references are not allowed",
            )
        ) from e


def iter_schema_events(source: XmlSource) -> Iterator[SchemaEvent]:
    """Yield schema events for an XML document.

    Text streams are parsed as already-decoded characters, so an encoding
    named in the XML declaration is not applied a second time.

    Args:
        source: File path, raw bytes, or a binary or text file object

    Yields:
        A ``StartElement`` (with its line and column) for every element start,
        and a ``Characters`` event when an element closes with non-blank
        direct text

    Raises:
        SchemaViolation: If the document is not well-formed XML or uses a
            forbidden construct (entity declarations, external references)
    """
    if isinstance(source, (str, Path)):
        with open(source, "rb") as handle:
            yield from _parse_stream(handle)
    elif isinstance(source, bytes):
        yield from _parse_stream(io.BytesIO(source))
    else:
        yield from _parse_stream(source)
