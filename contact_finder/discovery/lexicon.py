"""
Term tables used to tell real people apart from generic business text.

Everything here is built once at import and exposed read-only (frozenset,
tuple, MappingProxyType). Industry-keyed tables use the plain industry value
(e.g. "technology") as key, so both strings and Industry members look up.
"""

import re
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

# ===== Placeholder names =====

# "John Smith" / "Jane Smith" are deliberately absent: they are common real names.
PLACEHOLDER_NAMES: FrozenSet[str] = frozenset({
    "john doe", "jane doe",
    "test user", "demo user", "example user",
    "admin user", "guest user", "unknown user",
})

PLACEHOLDER_SUBSTRINGS: Tuple[str, ...] = ("test", "demo", "example", "admin", "guest", "user")


# ===== Generic / business / sector vocabulary =====

GENERIC_TERMS: FrozenSet[str] = frozenset({
    # Job titles and positions
    "chief", "executive", "officer", "ceo", "cto", "cfo", "coo", "president",
    "director", "manager", "managers", "head", "lead", "senior", "junior", "principal",
    "vice", "assistant", "associate", "coordinator", "specialist", "analyst",
    "administrator", "supervisor", "founder", "co-founder", "owner", "partner",
    "developer", "engineer", "architect", "consultant", "advisor", "strategist",
    "role", "roles",
    # Departments
    "sales", "marketing", "finance", "accounting", "hr", "operations", "it", "support",
    "product", "project", "research", "development", "legal", "compliance", "quality",
    "assurance",
    # Business terms
    "leadership", "team", "member", "staff", "employee", "general", "key", "position",
    "department", "division", "management", "contact", "person", "representative",
    "individual", "business", "company", "enterprise", "organization", "corporation",
    "admin", "professional", "consolidated", "service", "office", "personnel",
    "resource", "operation", "customer", "printing", "press", "commercial", "digital",
    "production", "industry", "focus", "busy", "founding", "competitive", "landscape",
    # Company identifiers
    "incorporated", "inc", "llc", "ltd", "group", "holdings", "solutions", "services",
    "international", "global", "industries", "systems", "technologies", "associates",
    "consulting", "ventures", "partners", "limited", "corp", "cooperative", "co", "plc",
    # Industry and strategy terms
    "information", "technology", "software", "reputation", "control", "strategic",
    "direction", "overall", "vision", "strategy", "innovation", "infrastructure",
    "technical", "leader", "primary", "secondary", "expert", "experts", "clients",
    "base", "score", "validation",
    # Descriptive business terms
    "commerce", "website", "design", "web", "managing", "operating", "board",
    "advisory", "steering", "corporate",
    # Planning
    "planning", "schedule", "plan", "budget", "budgeting", "time", "year", "day",
    # Marketing and media
    "interactive", "social", "media", "creative", "content", "writing", "subject",
    "publishing", "editorial", "publication", "advertising", "print", "broadcaster",
    # Tech
    "tech", "stack", "implementation", "verification", "process", "technological",
    "integration", "network", "wireless", "broadband", "telecom", "data",
    # Construction
    "building", "construction", "site", "engineering", "architecture", "facility",
    "maintenance",
    # Non-name common words
    "the", "of", "and", "a", "to", "in", "is", "at",
    # Entertainment and events
    "entertainment", "music", "film", "television", "video", "show", "event",
    "performance", "concert", "festival", "venue", "conference", "exhibition",
    # Healthcare and wellness
    "healthcare", "medical", "hospital", "clinic", "care", "insurance", "health",
    "dental", "pharmacy", "pharmaceutical", "treatment", "therapy", "wellness",
    "fitness", "gym", "nutrition", "skincare", "spa", "beauty", "cosmetics",
    # Finance
    "investment", "tax", "invest", "fund", "loan", "credit", "debt", "revenue",
    "policy", "premium", "coverage", "claim", "underwriting", "risk",
    # Education
    "education", "school", "university", "college", "degree", "training", "program",
    "course", "certification", "academy",
    # Travel and hospitality
    "tourism", "travel", "vacation", "hospitality", "hotel", "resort", "lodging",
    "reception", "concierge", "booking", "reservation", "catering", "restaurant",
    "food", "menu", "dining", "delivery", "beverage", "kitchen",
    # Geography
    "region", "country", "city", "state", "province", "county", "district", "street",
    "avenue", "northern", "southern", "eastern", "western", "north", "south", "east",
    "west", "asia", "pacific",
    # Government
    "government", "authority", "municipality", "agency",
    # Manufacturing, logistics and retail
    "manufacturing", "factory", "assembly", "industrial", "fabrication", "machinery",
    "equipment", "automation", "inventory", "procurement", "logistics", "warehouse",
    "distribution", "shipping", "freight", "cargo", "fleet", "transit", "retail",
    "store", "shop", "outlet", "merchant", "marketplace", "e-commerce", "merchandise",
    # Agriculture and energy
    "agriculture", "farming", "livestock", "harvest", "agribusiness", "energy",
    "power", "electricity", "utility", "renewable", "solar", "grid",
    # Legal
    "law", "attorney", "lawyer", "counsel", "litigation", "regulatory", "patent",
    "trademark",
})

DISALLOWED_NAME_TERMS: FrozenSet[str] = frozenset({
    "admin", "info", "sales", "support", "contact", "service", "manager",
    "company", "business", "team", "department", "staff", "employee",
    "office", "reception", "inquiry", "customer", "help", "assistance",
    "website", "online", "email", "site", "web", "page", "click", "login",
    "account", "password", "username", "user", "member",
    "consultation", "appointment", "booking", "reservation", "question",
    "delivery", "shipping", "order", "product", "solution",
    "location", "address", "street", "avenue", "building", "floor",
    "new", "old", "good", "great", "best", "better", "top", "main",
    "important", "key", "primary", "secondary", "first", "last",
    "mission", "vision", "value", "quality", "experience", "expert",
    "professional", "industry", "market", "section", "about", "home",
})


# ===== Per-industry tables =====

# Words that betray an industry-flavoured non-person entry ("Cloud Security Team").
INDUSTRY_SECTOR_TERMS: Mapping[str, FrozenSet[str]] = MappingProxyType({
    "technology": frozenset({
        "software", "hardware", "developer", "architect", "programmer", "coder", "engineer",
        "frontend", "backend", "fullstack", "devops", "sysadmin", "database", "cloud",
        "infrastructure", "security", "cybersecurity", "network", "ai", "ml",
    }),
    "healthcare": frozenset({
        "physician", "doctor", "nurse", "practitioner", "surgeon", "specialist", "technician",
        "therapist", "pharmacist", "clinician", "pathologist", "radiologist", "administrator",
        "provider", "patient", "care", "medical", "clinical", "diagnostic", "therapeutic",
    }),
    "financial": frozenset({
        "banker", "broker", "advisor", "analyst", "trader", "accountant", "auditor",
        "controller", "underwriter", "portfolio", "wealth", "asset", "investment", "credit",
        "loan", "mortgage", "insurance", "risk", "compliance", "regulatory", "fiduciary",
    }),
    "manufacturing": frozenset({
        "production", "assembly", "operator", "technician", "machinist", "welder", "fabricator",
        "inspector", "supervisor", "scheduler", "inventory", "logistics", "safety", "quality",
        "maintenance", "plant", "facility", "industrial", "process",
    }),
    "retail": frozenset({
        "merchandiser", "buyer", "planner", "store", "shop", "associate", "clerk",
        "cashier", "inventory", "ecommerce", "fulfillment", "category", "assortment", "pricing",
        "vendor", "supplier", "procurement", "customer", "consumer", "shopping",
    }),
    "legal": frozenset({
        "attorney", "lawyer", "counsel", "paralegal", "associate", "partner", "clerk",
        "litigation", "corporate", "contract", "compliance", "regulatory", "intellectual",
        "property", "patent", "trademark", "copyright", "estate", "family", "criminal", "civil",
    }),
    "education": frozenset({
        "teacher", "professor", "instructor", "educator", "faculty", "staff", "administrator",
        "principal", "dean", "provost", "chancellor", "tutor", "coach", "counselor",
        "academic", "curriculum", "pedagogy", "assessment", "learning", "teaching",
    }),
    "construction": frozenset({
        "builder", "contractor", "subcontractor", "architect", "engineer", "estimator", "surveyor",
        "foreman", "superintendent", "project", "manager", "inspector", "safety", "worker",
        "laborer", "carpenter", "electrician", "plumber", "mason", "operator",
    }),
    "transportation": frozenset({
        "driver", "operator", "conductor", "pilot", "captain", "attendant", "dispatcher",
        "scheduler", "coordinator", "planner", "analyst", "specialist", "manager", "agent",
        "broker", "customs", "freight", "shipping", "logistics", "fleet",
    }),
    "marketing": frozenset({
        "advertiser", "marketer", "strategist", "planner", "buyer", "creative", "director",
        "designer", "copywriter", "content", "digital", "social", "media", "brand",
        "public", "relations", "communications", "campaign", "manager", "specialist",
    }),
    "consulting": frozenset({
        "consultant", "advisor", "advisory", "strategist", "analyst", "engagement",
        "practice", "delivery", "transformation", "assessment", "methodology", "framework",
    }),
    "agriculture": frozenset({
        "farmer", "grower", "rancher", "breeder", "herdsman", "worker", "laborer",
        "agronomist", "technician", "specialist", "consultant", "operator", "veterinarian",
        "inspector", "crop", "livestock", "dairy", "poultry", "organic", "sustainable",
    }),
    "energy": frozenset({
        "engineer", "technician", "operator", "analyst", "specialist", "manager", "coordinator",
        "planner", "inspector", "regulator", "researcher", "scientist", "geologist", "developer",
        "renewable", "fossil", "nuclear", "solar", "wind", "hydro", "power",
    }),
    "government": frozenset({
        "official", "administrator", "officer", "agent", "clerk", "coordinator", "specialist",
        "planner", "analyst", "director", "commissioner", "secretary", "minister", "representative",
        "diplomat", "legislator", "regulator", "inspector", "auditor", "policy",
    }),
    "hospitality": frozenset({
        "manager", "director", "coordinator", "supervisor", "attendant", "concierge", "receptionist",
        "housekeeper", "chef", "cook", "server", "waiter", "waitress", "bartender", "host",
        "hostess", "guide", "agent", "planner", "operator", "event",
    }),
})

# Legitimate role titles per industry; a match in the role text earns a bonus.
INDUSTRY_PROFESSIONAL_TITLES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "technology": (
        "software engineer", "systems architect", "cto", "developer", "devops engineer",
        "product manager", "scrum master", "data scientist", "full stack", "frontend",
        "backend", "qa engineer", "information security", "cloud architect", "engineer",
    ),
    "healthcare": (
        "physician", "surgeon", "medical director", "nurse practitioner", "chief medical",
        "healthcare administrator", "medical officer", "clinical director", "doctor",
        "specialist", "head of radiology", "chief of staff", "pharmacist",
    ),
    "financial": (
        "investment banker", "financial advisor", "financial analyst", "portfolio manager",
        "wealth manager", "fund manager", "chief financial", "controller", "treasurer",
        "actuary", "underwriter", "financial planner", "credit analyst",
    ),
    "legal": (
        "attorney", "lawyer", "legal counsel", "partner", "associate", "legal director",
        "general counsel", "law partner", "chief legal", "litigator", "solicitor",
        "barrister", "compliance officer", "judge",
    ),
    "construction": (
        "project manager", "general contractor", "construction manager", "site supervisor",
        "architect", "civil engineer", "structural engineer", "estimator", "surveyor",
        "superintendent", "foreman", "master plumber", "master electrician",
    ),
    "retail": (
        "store manager", "retail director", "merchandising manager", "buyer", "category manager",
        "regional manager", "visual merchandiser", "sales associate", "operations manager",
        "ecommerce director", "supply chain manager",
    ),
    "education": (
        "principal", "headmaster", "dean", "professor", "department chair", "superintendent",
        "academic director", "provost", "faculty head", "curriculum director",
        "school administrator", "teacher", "instructor",
    ),
    "manufacturing": (
        "plant manager", "production manager", "quality control", "industrial engineer",
        "operations director", "manufacturing engineer", "supply chain", "procurement manager",
        "facilities manager", "lean manufacturing", "master craftsman",
    ),
    "consulting": (
        "managing partner", "engagement manager", "consulting director", "principal consultant",
        "management consultant", "senior advisor", "strategy consultant", "transformation lead",
        "senior partner", "practice leader", "business consultant",
    ),
    "marketing": (
        "creative director", "brand manager", "marketing director", "account director",
        "media director", "head of growth", "communications director", "content strategist",
    ),
    "transportation": (
        "fleet manager", "logistics manager", "operations director", "dispatch manager",
        "supply chain director", "terminal manager", "freight manager",
    ),
    "energy": (
        "plant manager", "chief engineer", "project engineer", "operations director",
        "asset manager", "energy trader", "grid operations",
    ),
    "hospitality": (
        "general manager", "hotel manager", "executive chef", "food and beverage director",
        "director of sales", "revenue manager", "front office manager",
    ),
    "agriculture": (
        "farm manager", "agronomist", "operations manager", "herd manager",
        "production manager", "sustainability director",
    ),
    "government": (
        "commissioner", "director", "chief of staff", "deputy director",
        "program manager", "city manager", "administrator",
    ),
})

# Department lists used by the department-heads prompt.
DEFAULT_DEPARTMENTS: Tuple[str, ...] = (
    "Engineering/Development/IT",
    "Sales/Business Development",
    "Marketing/Communications",
    "Finance/Accounting",
    "Operations",
    "Human Resources",
    "Product Management",
)

INDUSTRY_DEPARTMENTS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "technology": (
        "Engineering/Development", "Product Management", "Customer Success", "Data Science",
        "Information Security", "Technical Operations", "UX/Design",
    ),
    "healthcare": (
        "Medical Affairs", "Clinical Operations", "Patient Services", "Healthcare Administration",
        "Medical Research", "Regulatory Affairs", "Care Management",
    ),
    "financial": (
        "Investment Banking", "Asset Management", "Risk Management", "Wealth Management",
        "Trading", "Financial Analysis", "Credit Operations",
    ),
})

# Hints for the middle-management prompt when no industry titles are known.
DEFAULT_MIDDLE_MANAGEMENT_ROLES: Tuple[str, ...] = (
    "Team Lead", "Senior Manager", "Project Manager", "Director",
)


# ===== Role patterns =====

LEADERSHIP_ROLE_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\b(ceo|cto|cfo|coo|cmo|cio|chief)\b", re.IGNORECASE),
    re.compile(r"\b(president|founder|co-founder|owner)\b", re.IGNORECASE),
    re.compile(r"\b(chairman|chairwoman|chair)\b", re.IGNORECASE),
    re.compile(r"\b(director|head|lead)\b", re.IGNORECASE),
    re.compile(r"\b(vp|vice president)\b", re.IGNORECASE),
    re.compile(r"\b(partner|principal)\b", re.IGNORECASE),
)

FOUNDER_OWNER_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\b(?:founder|co-founder|founding)\b", re.IGNORECASE),
    re.compile(r"\b(?:owner|proprietor)\b", re.IGNORECASE),
    re.compile(r"\bceo\b", re.IGNORECASE),
    re.compile(r"\b(?:president|chief\s+executive)\b", re.IGNORECASE),
    re.compile(r"\b(?:managing\s+director|managing\s+partner)\b", re.IGNORECASE),
)

# Seniority words stripped before comparing role keywords.
SENIORITY_WORDS: FrozenSet[str] = frozenset({
    "senior", "junior", "lead", "principal", "head", "chief", "vice", "assistant",
    "associate", "director", "manager", "supervisor", "coordinator", "specialist",
    "analyst", "executive", "officer",
})

ROLE_STOPWORDS: FrozenSet[str] = frozenset({"and", "the", "of", "for", "in", "at", "to", "on"})

ROLE_AFFINITY_GROUPS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "marketing": ("marketing", "brand", "advertising", "communications", "pr", "digital", "content", "social"),
    "engineering": ("engineering", "software", "development", "technical", "technology", "architect", "programmer"),
    "sales": ("sales", "business development", "account", "revenue", "commercial", "partnership"),
    "operations": ("operations", "logistics", "supply chain", "procurement", "fulfillment", "manufacturing"),
    "finance": ("finance", "accounting", "financial", "treasury", "budget", "controller", "audit"),
    "hr": ("human resources", "hr", "people", "talent", "recruiting", "organizational"),
    "product": ("product", "innovation", "strategy", "planning", "roadmap"),
    "legal": ("legal", "compliance", "regulatory", "counsel", "risk", "governance"),
})


# ===== Predicates =====

_TOKEN_SPLIT = re.compile(r"[\s\-]+")


def _tokens(text: str) -> list:
    return [token for token in _TOKEN_SPLIT.split(text.lower().strip()) if token]


def _industry_key(industry) -> Optional[str]:
    # Enum members hash by name, so tables are looked up by value
    if not industry:
        return None
    return str(getattr(industry, "value", industry)).lower()


def is_placeholder_name(name: str) -> bool:
    """True for known test/demo names or any name containing a placeholder word."""
    normalized = " ".join(name.lower().split())
    if normalized in PLACEHOLDER_NAMES:
        return True
    return any(fragment in normalized for fragment in PLACEHOLDER_SUBSTRINGS)


def count_generic_terms(name: str) -> int:
    """Number of whole tokens in name that are generic business vocabulary."""
    return sum(1 for token in _tokens(name) if token in GENERIC_TERMS)


def generic_term_penalty(name: str) -> int:
    """
    Penalty for generic vocabulary in a name.

    35 per generic token, plus 20 when there is more than one, capped at 75.
    """
    count = count_generic_terms(name)
    if count == 0:
        return 0
    penalty = count * 35
    if count > 1:
        penalty += 20
    return min(75, penalty)


def count_sector_terms(name: str, industry: Optional[str]) -> int:
    """Number of tokens in name that are sector vocabulary for industry."""
    terms = INDUSTRY_SECTOR_TERMS.get(_industry_key(industry) or "")
    if not terms:
        return 0
    return sum(1 for token in _tokens(name) if token in terms)


def contains_disallowed_term(name: str) -> bool:
    """True when a whitespace-separated word of name is a disallowed name term."""
    return any(token in DISALLOWED_NAME_TERMS for token in name.lower().split())


def is_leadership_role(role: Optional[str]) -> bool:
    if not role:
        return False
    return any(pattern.search(role) for pattern in LEADERSHIP_ROLE_PATTERNS)


def is_founder_or_owner(role: Optional[str]) -> bool:
    if not role:
        return False
    return any(pattern.search(role) for pattern in FOUNDER_OWNER_PATTERNS)


def is_industry_specific_role(role: Optional[str], industry: Optional[str]) -> bool:
    """
    True when role mentions one of the professional titles of industry.

    Titles must start on a word boundary ("cto" does not match "director").
    """
    if not role:
        return False
    titles = INDUSTRY_PROFESSIONAL_TITLES.get(_industry_key(industry) or "")
    if not titles:
        return False
    role_lower = role.lower()
    return any(re.search(r"\b" + re.escape(title), role_lower) for title in titles)


def industry_specific_roles(industry: Optional[str]) -> Tuple[str, ...]:
    """Role hints for the middle-management prompt, title-cased."""
    titles = INDUSTRY_PROFESSIONAL_TITLES.get(_industry_key(industry) or "")
    if not titles:
        return DEFAULT_MIDDLE_MANAGEMENT_ROLES
    return tuple(title[:1].upper() + title[1:] for title in titles)


def departments_for(industry: Optional[str]) -> Tuple[str, ...]:
    return INDUSTRY_DEPARTMENTS.get(_industry_key(industry) or "", DEFAULT_DEPARTMENTS)
