"""
Response Parser: raw provider text -> list of {name, role} pairs.

Provider output is never trusted to follow the requested schema. The parser
looks for the first JSON object in the text, then for the people array under
the expected keys, and finally for any array in the object.
"""

import logging
from collections import deque
from typing import Any, Iterable, List, Optional

from contact_finder.common.error_handling import ParseError
from contact_finder.common.json_utils import parse_llm_json
from contact_finder.discovery.types import RawPair

logger = logging.getLogger(__name__)

# Keys the phase prompts ask for, in phase order
PHASE_RESPONSE_KEYS = ("leaders", "departmentLeaders", "managers", "targetContacts")


class ResponseParser:
    """Extracts raw pairs from provider text. Stateless; safe to share."""

    def __init__(self, keys: Iterable[str] = PHASE_RESPONSE_KEYS):
        self.keys = tuple(keys)

    def parse(self, raw_text: Optional[str], preferred_key: Optional[str] = None) -> List[RawPair]:
        """
        Parse provider text, degrading to an empty list on any problem.

        Args:
            raw_text: Provider response
            preferred_key: The executing phase's own key, tried first

        Returns:
            Raw pairs with a usable name, in response order
        """
        try:
            return self.parse_strict(raw_text, preferred_key)
        except ParseError as e:
            logger.debug(f"Unparseable provider response: {e}")
            return []

    def parse_strict(self, raw_text: Optional[str], preferred_key: Optional[str] = None) -> List[RawPair]:
        """
        Like parse(), but raises ParseError when there is no object or no array.

        An array that is present but empty is a valid (empty) answer.
        """
        try:
            decoded = parse_llm_json(raw_text or "")
        except ValueError as e:
            raise ParseError(str(e)) from e

        if not isinstance(decoded, dict):
            raise ParseError(f"Expected a JSON object, got {type(decoded).__name__}")

        people = self._find_people(decoded, preferred_key)
        if people is None:
            raise ParseError("No array found in provider response")

        pairs = [pair for pair in (self._to_pair(item) for item in people) if pair is not None]
        logger.debug(f"Parsed {len(pairs)} of {len(people)} entries")
        return pairs

    def _find_people(self, decoded: dict, preferred_key: Optional[str]) -> Optional[list]:
        keys = ([preferred_key] if preferred_key else []) + [k for k in self.keys if k != preferred_key]
        for key in keys:
            value = decoded.get(key)
            if isinstance(value, list):
                return value
        return self._first_array(decoded)

    @staticmethod
    def _first_array(decoded: dict) -> Optional[list]:
        # Breadth first so a top-level array wins over a nested one
        queue = deque([decoded])
        while queue:
            node = queue.popleft()
            for value in node.values():
                if isinstance(value, list):
                    return value
            queue.extend(value for value in node.values() if isinstance(value, dict))
        return None

    @staticmethod
    def _to_pair(item: Any) -> Optional[RawPair]:
        if not isinstance(item, dict):
            return None
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            return None
        role = item.get("role")
        if role is not None and not isinstance(role, str):
            role = str(role)
        return RawPair(name=name.strip(), role=role.strip() if role else None)
