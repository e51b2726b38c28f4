"""Parsing of raw history records into numbered, time-filtered change sets.

Input is zero or more <Modification> records in ascending commit order:

    <Modification>
      <Type>Commit 1a2b3c</Type>
      <ModifiedTime>2009-01-01T10:00:00+10:00</ModifiedTime>
      <UserName>Fred</UserName>
      <EmailAddress>fred@example.com</EmailAddress>
      <Comment><![CDATA[Fix & tidy]]></Comment>
    </Modification>

Sequence numbers are assigned before the time filter, so a filtered result
keeps each entry's position in the complete history (e.g. 3 and 4, not 1
and 2).
"""

import xml.etree.ElementTree as ET
from datetime import datetime

from ..errors import ParseError
from ..poller_logging import get_logger
from .models import ChangeSetEntry, TimeWindow

ENVELOPE = (
    '<ArrayOfModification xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
    'xmlns:xsd="http://www.w3.org/2001/XMLSchema">{records}</ArrayOfModification>'
)


class HistoryParser:
    """Turns raw structured records into ChangeSetEntry lists."""

    def __init__(self) -> None:
        self.logger = get_logger()

    def parse(self, raw_records: str, window: TimeWindow) -> list[ChangeSetEntry]:
        """Parse records and keep those inside the inclusive window.

        Args:
            raw_records: Concatenated <Modification> records, oldest first
            window: Inclusive timestamp range to keep

        Returns:
            Entries inside the window, numbered by absolute history position

        Raises:
            ParseError: If the records are not well-formed or a timestamp
                cannot be read
        """
        try:
            root = ET.fromstring(ENVELOPE.format(records=raw_records))
            entries = [
                self._to_entry(element, number)
                for number, element in enumerate(root.findall("Modification"), start=1)
            ]
        except (ET.ParseError, ValueError) as e:
            self.logger.error(f"History parsing failed: {e}")
            raise ParseError() from e

        selected = [entry for entry in entries if window.contains(entry.timestamp)]
        self.logger.debug(f"Parsed {len(entries)} commits, {len(selected)} in window")
        return selected

    def _to_entry(self, element: ET.Element, sequence_number: int) -> ChangeSetEntry:
        modification_type, _, commit_id = _text(element, "Type").partition(" ")
        return ChangeSetEntry(
            sequence_number=sequence_number,
            timestamp=_timestamp(element),
            author_name=_text(element, "UserName"),
            author_email=_text(element, "EmailAddress"),
            message=_text(element, "Comment"),
            commit_id=commit_id.strip(),
            modification_type=modification_type,
        )


def _text(element: ET.Element, tag: str) -> str:
    # CDATA sections are folded into .text by the parser
    return element.findtext(tag, default="") or ""


def _timestamp(element: ET.Element) -> datetime:
    value = _text(element, "ModifiedTime").strip()
    if not value:
        raise ValueError("Modification without ModifiedTime")
    return datetime.fromisoformat(value)
