"""Offline ingestion: recover LINQ Connect payloads from an HTTP archive (HAR) capture."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from lunch_calendar.feed import parse_allergies, parse_family_menu, parse_menu_identifier
from lunch_calendar.models import AllergyItem, FamilyMenu, MenuIdentifier

logger = logging.getLogger(__name__)

API_HOST = "linqconnect.com"


class HarError(Exception):
    """The capture cannot be used as a menu source."""


class MissingPayloadError(HarError):
    def __init__(self, payload: str):
        self.payload = payload
        super().__init__(f"HAR file does not contain a {payload} response")


@dataclass
class HarCapture:
    menu: FamilyMenu
    allergies: list[AllergyItem]
    identifier: MenuIdentifier
    user_agent: str | None = None


def _is_menu_url(url: str) -> bool:
    return "FamilyMenu?" in url and "startDate" in url


def _is_allergy_url(url: str) -> bool:
    return "FamilyAllergy" in url and "districtId" in url


def _is_identifier_url(url: str) -> bool:
    return "FamilyMenuIdentifier" in url


def _header_value(request: dict, name: str) -> str | None:
    for header in request.get("headers") or []:
        if str(header.get("name", "")).lower() == name.lower():
            return header.get("value") or None
    return None


def parse_har(data: dict) -> HarCapture:
    """Extract the menu, allergy and identifier payloads from decoded HAR JSON.

    The first entry that decodes successfully wins for each payload. Entries
    without response text are skipped, as are bodies that fail to decode.
    """
    try:
        entries = data["log"]["entries"]
    except (KeyError, TypeError):
        raise HarError("Not a HAR capture: missing log.entries")

    menu: FamilyMenu | None = None
    allergies: list[AllergyItem] | None = None
    identifier: MenuIdentifier | None = None
    user_agent: str | None = None

    for entry in entries:
        request = entry.get("request") or {}
        url = request.get("url") or ""

        if user_agent is None and API_HOST in url.lower():
            user_agent = _header_value(request, "User-Agent")
            if user_agent:
                logger.info("Extracted User-Agent from HAR: %s", user_agent)

        content = (entry.get("response") or {}).get("content") or {}
        text = content.get("text")
        if not text:
            continue

        try:
            if menu is None and _is_menu_url(url):
                menu = parse_family_menu(json.loads(text))
                logger.info("Parsed FamilyMenu response (%d chars)", len(text))
            elif allergies is None and _is_allergy_url(url):
                allergies = parse_allergies(json.loads(text))
                logger.info("Parsed FamilyAllergy response with %d allergens", len(allergies))
            elif identifier is None and _is_identifier_url(url):
                identifier = parse_menu_identifier(json.loads(text))
                logger.info("Parsed FamilyMenuIdentifier response for %s", identifier.district_name)
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            logger.warning("Failed to parse HAR entry for URL %s: %s", url, e)

    if menu is None:
        raise MissingPayloadError("FamilyMenu")
    if allergies is None:
        raise MissingPayloadError("FamilyAllergy")
    if identifier is None:
        raise MissingPayloadError("FamilyMenuIdentifier")

    return HarCapture(menu=menu, allergies=allergies, identifier=identifier, user_agent=user_agent)


def load_har(har_path: Path) -> HarCapture:
    """Read a .har file from disk and extract its payloads."""
    logger.info("Loading HAR file from %s", har_path)
    with open(har_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise HarError(f"{har_path} is not valid JSON: {e}") from e
    return parse_har(data)


def _read_json(path: Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_json_sources(
    menu_path: Path,
    allergies_path: Path | None = None,
    identifier_path: Path | None = None,
) -> HarCapture:
    """Build a capture from individually saved API responses.

    Only the FamilyMenu response is required; missing allergy or identifier
    files leave those payloads empty.
    """
    logger.info("Loading FamilyMenu response from %s", menu_path)
    menu = parse_family_menu(_read_json(menu_path))
    allergies = parse_allergies(_read_json(allergies_path)) if allergies_path else []
    identifier = (
        parse_menu_identifier(_read_json(identifier_path)) if identifier_path else MenuIdentifier()
    )
    return HarCapture(menu=menu, allergies=allergies, identifier=identifier)
