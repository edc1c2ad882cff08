"""
Prompts for the four search phases.

Each phase has a system prompt, a user prompt template and the JSON shape
the provider is asked to answer with. Every user prompt carries the
no-fabrication instruction.
"""

from typing import Optional

from contact_finder.discovery import lexicon

NO_FABRICATION = "IMPORTANT: If you cannot find data, return an empty array. Do NOT make up data."

_PERSON_FIELDS = """For each person, provide their:
- Full name (first and last name)
- Current role/position"""


# ===== CORE LEADERSHIP =====

SYSTEM_PROMPT_LEADERSHIP = """You are an expert in identifying key leadership personnel at companies.
Your task is to identify the leadership team members at the specified company.
Only report real, verifiable people."""

USER_PROMPT_LEADERSHIP_TEMPLATE = """Identify the core leadership team at {company}. Focus on:
1. C-level executives (CEO, CTO, CFO, COO, etc.)
2. Founders and co-founders
3. Board members and directors
4. Division/department heads

{person_fields}

{no_fabrication}{industry_context}"""

FORMAT_LEADERSHIP = """{
  "leaders": [
    {"name": "John Smith", "role": "Chief Executive Officer"}
  ]
}"""


# ===== DEPARTMENT HEADS =====

SYSTEM_PROMPT_DEPARTMENT_HEADS = """You are an expert in identifying department leaders at companies.
Your task is to identify key people leading various departments at the specified company.
Only report real, verifiable people."""

USER_PROMPT_DEPARTMENT_HEADS_TEMPLATE = """Identify the key department leaders at {company}. Focus on these departments:
{departments}
{industry_context}
{person_fields}

{no_fabrication}"""

FORMAT_DEPARTMENT_HEADS = """{
  "departmentLeaders": [
    {"name": "Maria Garcia", "role": "Head of Marketing"}
  ]
}"""


# ===== MIDDLE MANAGEMENT =====

SYSTEM_PROMPT_MIDDLE_MANAGEMENT = """You are an expert in identifying influential middle managers and technical leaders at companies.
Your task is to identify key people who make important decisions but may not be in the C-suite.
Only report real, verifiable people."""

USER_PROMPT_MIDDLE_MANAGEMENT_TEMPLATE = """Identify important middle managers and key technical leaders at {company}. Focus on:
1. Team leads
2. Senior managers
3. Project managers
4. Technical specialists with authority
5. Key decision-makers below C-level

{person_fields}

{no_fabrication}{industry_context}"""

FORMAT_MIDDLE_MANAGEMENT = """{
  "managers": [
    {"name": "Alice Johnson", "role": "Senior Product Manager"}
  ]
}"""


# ===== CUSTOM TARGET =====

SYSTEM_PROMPT_CUSTOM_TARGET = """You are an expert in identifying specific professionals at companies.
Your task is to find people with the specific role or position requested at the specified company.
Only report real, verifiable people."""

USER_PROMPT_CUSTOM_TARGET_TEMPLATE = """Find people at {company} who have roles related to: {target}

Look for variations and similar positions, such as:
- Direct matches to "{target}"
- Related roles, titles and synonyms
- People who might handle responsibilities related to {target}

{person_fields}

{no_fabrication}{industry_context}"""

FORMAT_CUSTOM_TARGET_TEMPLATE = """{{
  "targetContacts": [
    {{"name": "David Lee", "role": "{target} or related position"}}
  ]
}}"""


def _industry_value(industry) -> Optional[str]:
    if not industry:
        return None
    return getattr(industry, "value", str(industry))


def build_leadership_prompt(company: str, industry=None) -> str:
    name = _industry_value(industry)
    context = (
        f"\nThis company is in the {name} industry. Focus on industry-specific leadership roles."
        if name else ""
    )
    return USER_PROMPT_LEADERSHIP_TEMPLATE.format(
        company=company,
        person_fields=_PERSON_FIELDS,
        no_fabrication=NO_FABRICATION,
        industry_context=context,
    )


def build_department_heads_prompt(company: str, industry=None) -> str:
    name = _industry_value(industry)
    departments = "\n".join(f"- {d}" for d in lexicon.departments_for(name))
    context = (
        f"\nThis company is in the {name} industry. Focus on industry-specific department leaders.\n"
        if name else ""
    )
    return USER_PROMPT_DEPARTMENT_HEADS_TEMPLATE.format(
        company=company,
        departments=departments,
        industry_context=context,
        person_fields=_PERSON_FIELDS,
        no_fabrication=NO_FABRICATION,
    )


def build_middle_management_prompt(company: str, industry=None) -> str:
    name = _industry_value(industry)
    context = ""
    if name:
        roles = "\n".join(f"- {role}" for role in lexicon.industry_specific_roles(name))
        context = f"\nThis company is in the {name} industry. Focus especially on these roles:\n{roles}"
    return USER_PROMPT_MIDDLE_MANAGEMENT_TEMPLATE.format(
        company=company,
        person_fields=_PERSON_FIELDS,
        no_fabrication=NO_FABRICATION,
        industry_context=context,
    )


def build_custom_target_prompt(company: str, target: str, industry=None) -> str:
    name = _industry_value(industry)
    context = (
        f"\nThis company is in the {name} industry. Consider industry-specific variations of this role."
        if name else ""
    )
    return USER_PROMPT_CUSTOM_TARGET_TEMPLATE.format(
        company=company,
        target=target,
        person_fields=_PERSON_FIELDS,
        no_fabrication=NO_FABRICATION,
        industry_context=context,
    )


def custom_target_format(target: str) -> str:
    return FORMAT_CUSTOM_TARGET_TEMPLATE.format(target=target)
