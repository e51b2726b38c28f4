"""Reading CruiseControl-style <git> source control blocks.

    <git>
      <executable>git</executable>
      <repository>c:\\git\\ccnet\\mygitrepo</repository>
      <branch>master</branch>
      <timeout units="minutes">10</timeout>
      <workingDirectory>c:\\git\\working</workingDirectory>
      <tagOnSuccess>true</tagOnSuccess>
      <autoGetSource>true</autoGetSource>
    </git>

A <timeout> counts milliseconds unless its units attribute says otherwise.
"""

import xml.etree.ElementTree as ET
from typing import Any

from ..errors import ConfigurationError
from ..poller_logging import get_logger

logger = get_logger()

# Key mapping from CruiseControl element names to config fields
KEY_MAPPING = {
    "executable": "executable",
    "repository": "repository",
    "branch": "branch",
    "tagCommitMessage": "tag_commit_message",
    "tagOnSuccess": "tag_on_success",
    "autoGetSource": "auto_get_source",
    "workingDirectory": "working_directory",
    "timeout": "timeout",
}

# Milliseconds is the default unit of a <timeout> element
TIMEOUT_UNITS = {
    "millis": 0.001,
    "seconds": 1,
    "minutes": 60,
    "hours": 3600,
}


def normalize_keys(raw: dict[str, Any]) -> dict[str, Any]:
    """Map camelCase option names to field names, leaving unknown keys as-is."""
    return {KEY_MAPPING.get(key, key): value for key, value in raw.items()}


def load_xml_block(text: str) -> dict[str, Any]:
    """Parse a <git> element into a dict of config fields.

    Raises:
        ConfigurationError: If the text is not a well-formed <git> element
    """
    try:
        root = ET.fromstring(text.strip())
    except ET.ParseError as e:
        raise ConfigurationError(f"Invalid <git> configuration block: {e}") from e

    if root.tag != "git":
        raise ConfigurationError(
            f"Expected a <git> element, found <{root.tag}>",
            suggestion="Wrap the source control options in <git>...</git>",
        )

    settings: dict[str, Any] = {}
    for child in root:
        if child.tag not in KEY_MAPPING:
            logger.warning(f"Ignoring unknown <git> option <{child.tag}>")
            continue
        if child.tag == "timeout":
            settings["timeout"] = timeout_seconds(child)
            continue
        # "true" is coerced by the model
        settings[KEY_MAPPING[child.tag]] = (child.text or "").strip()
    return settings


def timeout_seconds(element: ET.Element) -> float:
    """Convert a <timeout> element to seconds.

    Raises:
        ConfigurationError: If the value is not a number or the units are unknown
    """
    units = element.get("units", "millis").strip().lower()
    if units not in TIMEOUT_UNITS:
        raise ConfigurationError(
            f"Unknown <timeout> units '{units}'",
            suggestion=f"Use one of: {', '.join(TIMEOUT_UNITS)}",
        )
    text = (element.text or "").strip()
    try:
        value = float(text)
    except ValueError as e:
        raise ConfigurationError(f"Invalid <timeout> value '{text}'") from e
    return value * TIMEOUT_UNITS[units]
