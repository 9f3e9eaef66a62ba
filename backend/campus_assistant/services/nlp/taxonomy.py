"""
Fixed enumerations used by the field extractor, each paired with the keyword
table that drives keyword-overlap scoring.

Taxonomies are plain data handed to the classifier and validator, so callers
can swap the category set without touching the parsing code.
"""

from typing import Dict, List, Optional


class Taxonomy:
    """An enumerated set of labels with per-label signal keywords."""

    def __init__(self, name: str, keywords: Dict[str, List[str]], fallback: str):
        if not keywords:
            raise ValueError(f"Taxonomy {name!r} has no members")
        if fallback not in keywords:
            raise ValueError(f"Taxonomy {name!r} fallback {fallback!r} is not a member")

        self.name = name
        self.fallback = fallback
        # Member order is significant: it is the order candidates are checked in
        self.values: List[str] = list(keywords.keys())
        self.keywords: Dict[str, List[str]] = {
            value: [kw.lower() for kw in kws] for value, kws in keywords.items()
        }

    def __contains__(self, value: object) -> bool:
        return value in self.values

    def canonical(self, value: Optional[str]) -> Optional[str]:
        """Return the member equal to value ignoring case, or None."""
        if not value:
            return None
        wanted = value.strip().lower()
        for member in self.values:
            if member.lower() == wanted:
                return member
        return None

    def __repr__(self) -> str:
        return f"Taxonomy({self.name!r}, values={self.values!r})"


# ── Event categories ─────────────────────────────────────────────────────────

CAMPUS_EVENT_CATEGORIES: Dict[str, List[str]] = {
    'Academic': [
        'lecture', 'seminar', 'workshop', 'conference', 'symposium', 'class',
        'course', 'training', 'education', 'webinar', 'hackathon', 'research',
    ],
    'Cultural': [
        'cultural', 'dance', 'music', 'art', 'exhibition', 'performance',
        'concert', 'festival', 'celebration', 'drama', 'theatre',
    ],
    'Sports': [
        'sports', 'game', 'match', 'tournament', 'athletics', 'fitness',
        'play', 'championship', 'marathon', 'football', 'cricket',
    ],
    'Club': [
        'club', 'society', 'association', 'organization', 'committee',
        'council', 'union', 'group', 'team',
    ],
    'Career': [
        'career', 'job', 'placement', 'recruitment', 'interview', 'internship',
        'employment', 'profession', 'hiring', 'resume',
    ],
    'Other': [
        'activity', 'program', 'function', 'gathering', 'meeting', 'session',
        'occasion', 'ceremony',
    ],
}

DASHBOARD_EVENT_CATEGORIES: Dict[str, List[str]] = {
    'Workshop': ['workshop', 'hands-on', 'bootcamp'],
    'Seminar': ['seminar', 'webinar', 'talk', 'symposium'],
    'Sports': ['sport', 'game', 'match', 'tournament', 'fitness'],
    'Cultural': ['cultural', 'music', 'dance', 'concert', 'festival', 'art'],
    'Academic': ['lecture', 'class', 'course', 'exam', 'conference'],
    'Social': ['party', 'social', 'meetup', 'mixer', 'get-together'],
    'Other': [],
}

# ── Resources ────────────────────────────────────────────────────────────────

RESOURCE_TYPES: Dict[str, List[str]] = {
    'Test Paper': [
        'test', 'exam', 'midterm', 'quiz', 'question paper', 'past paper',
        'practice paper', 'mock',
    ],
    'Timetable': ['timetable', 'schedule', 'time table', 'calendar', 'routine'],
    'Notes': ['notes', 'handout', 'summary', 'slides', 'study guide', 'cheat sheet'],
}

RESOURCE_SUBJECTS: Dict[str, List[str]] = {
    'Mathematics': [
        'mathematics', 'maths', 'math', 'calculus', 'algebra', 'geometry', 'trigonometry',
        'statistics', 'probability', 'differential equations',
    ],
    'Computer Science': [
        'computer', 'programming', 'algorithm', 'data structure', 'software',
        'python', 'java', 'database', 'coding',
    ],
    'Physics': ['physics', 'mechanics', 'thermodynamics', 'optics', 'quantum', 'electromagnetism'],
    'Chemistry': ['chemistry', 'organic', 'inorganic', 'chemical', 'stoichiometry'],
    'Biology': ['biology', 'genetics', 'anatomy', 'botany', 'zoology', 'microbiology', 'cell'],
    'General': [],
}


def campus_event_taxonomy() -> Taxonomy:
    return Taxonomy('event_category', CAMPUS_EVENT_CATEGORIES, fallback='Other')


def dashboard_event_taxonomy() -> Taxonomy:
    return Taxonomy('event_category', DASHBOARD_EVENT_CATEGORIES, fallback='Other')


def resource_type_taxonomy() -> Taxonomy:
    return Taxonomy('resource_type', RESOURCE_TYPES, fallback='Notes')


def resource_subject_taxonomy() -> Taxonomy:
    return Taxonomy('resource_subject', RESOURCE_SUBJECTS, fallback='General')


EVENT_TAXONOMY_PRESETS = {
    'campus': campus_event_taxonomy,
    'dashboard': dashboard_event_taxonomy,
}


def event_taxonomy_for(preset: str) -> Taxonomy:
    """Build the event category taxonomy selected by the EVENT_TAXONOMY setting."""
    try:
        return EVENT_TAXONOMY_PRESETS[preset]()
    except KeyError:
        raise ValueError(f"Unknown event taxonomy preset: {preset!r}") from None
