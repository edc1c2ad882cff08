"""
Industry classification from a company name.

A single ordered keyword table; the first industry whose pattern matches
wins. Fragments match at the start of a word, so "tech" matches
"TechCorp" but not "Biotech" (which healthcare claims explicitly).
"""

import re
from typing import Optional, Tuple, Union

from contact_finder.discovery.types import Industry

_KEYWORDS: Tuple[Tuple[Industry, str], ...] = (
    (Industry.TECHNOLOGY, r"tech|software|digital|data|cyber|computer|app|robotic|cloud|ai\b|labs?\b"),
    (Industry.HEALTHCARE, r"health|medic|pharma|care\b|hospital|clinic|therapeutic|biotech"),
    (Industry.FINANCIAL, r"financ|bank|invest|capital|wealth|asset|fund|insur"),
    (Industry.LEGAL, r"law\b|legal|attorney|advocate|counsel|solicitor"),
    (Industry.CONSTRUCTION, r"construct|build|architect|engineer|development|propert|realty"),
    (Industry.MARKETING, r"marketing|advertis|media|brand|creative|agency|communications"),
    (Industry.RETAIL, r"retail|shop|store|mart\b|consumer|outlet|boutique"),
    (Industry.EDUCATION, r"educat|school|academy|learn|universit|college|institute"),
    (Industry.MANUFACTURING, r"manufact|factory|product|industrial|goods|machin|fabricat"),
    (Industry.CONSULTING, r"consult|advisor|advisory|partner|solution"),
    (Industry.TRANSPORTATION, r"transport|logistic|freight|shipping|airline|trucking|courier"),
    (Industry.ENERGY, r"energy|power|solar|wind|oil\b|gas\b|petro|utilit|renewable"),
    (Industry.HOSPITALITY, r"hotel|resort|hospitality|restaurant|catering|travel|inn\b"),
    (Industry.AGRICULTURE, r"farm|agri|agro|harvest|dairy|ranch|crop"),
    (Industry.GOVERNMENT, r"government|ministry|municipal|county|federal|department of|city of"),
)

_COMPILED = tuple(
    (industry, re.compile(r"\b(?:" + fragments + ")", re.IGNORECASE))
    for industry, fragments in _KEYWORDS
)


def classify_industry(company_name: Optional[str]) -> Optional[Industry]:
    """
    Map a company name to an Industry, or None when nothing matches.

    Example:
        >>> classify_industry("Acme Robotics")
        <Industry.TECHNOLOGY: 'technology'>
        >>> classify_industry("Smith & Sons") is None
        True
    """
    if not company_name:
        return None
    for industry, pattern in _COMPILED:
        if pattern.search(company_name):
            return industry
    return None


def resolve_industry(
    company_name: Optional[str],
    explicit: Union[Industry, str, None] = None,
) -> Optional[Industry]:
    """Prefer an explicitly provided industry over detection."""
    parsed = Industry.parse(explicit)
    if parsed is not None:
        return parsed
    return classify_industry(company_name)
