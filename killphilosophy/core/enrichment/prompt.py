"""
Prompt construction for deep searches.
"""
from typing import Dict, Optional

DEPTH_MODIFIERS = {
    'deep': ' Include comprehensive details, obscure connections, and thorough analysis.',
    'basic': ' Provide a brief overview with essential information only.',
    'medium': '',
}

# Clause appended when a filter is switched off
EXCLUSION_CLAUSES = {
    'papers': ' Exclude papers and publications.',
    'events': ' Exclude events and appearances.',
    'citations': ' Exclude citation information.',
    'influences': ' Exclude information about academic influences.',
}

DEFAULT_FILTERS = {name: True for name in EXCLUSION_CLAUSES}

SECTION_REQUEST = """ Please format your response to include the following sections for database enrichment:
        - Name: Full name of the academic
        - Bio: Brief biography
        - Papers: List of major publications with years
        - Events: Notable events, lectures, or appointments with years and locations
        - Connections: Other academics they influenced or were influenced by
        - Taxonomies: Categories such as discipline, tradition, era, methodology, and themes"""


def build_prompt(
    query: str = '',
    depth: str = 'medium',
    filters: Optional[Dict[str, bool]] = None,
    academic_name1: Optional[str] = None,
    academic_name2: Optional[str] = None
) -> str:
    """Build the user message for a deep search.

    Named academics override the free-text query: two names ask for the
    connections between them, one name asks for a profile.
    """
    if academic_name1 and academic_name2:
        content = f"Analyze the connections between {academic_name1} and {academic_name2}."
    elif academic_name1:
        content = f"Provide detailed information about {academic_name1}"
    else:
        content = query or ''

    content += DEPTH_MODIFIERS.get(depth, '')

    active = dict(DEFAULT_FILTERS)
    active.update(filters or {})
    for name, clause in EXCLUSION_CLAUSES.items():
        if not active[name]:
            content += clause

    return content + SECTION_REQUEST
