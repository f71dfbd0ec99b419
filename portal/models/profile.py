from enum import Enum

from portal.models.common import Record


class ParticipationType(str, Enum):
    PRESENTER = "presenter"
    ATTENDEE = "attendee"
    KEYNOTE = "keynote"
    PANELIST = "panelist"


PROFILE_FIELDS = (
    "full_name",
    "affiliation",
    "country",
    "bio",
    "phone",
    "website",
    "orcid",
    "research_interests",
    "academic_title",
    "participation_type",
    "dietary_requirements",
    "accommodation_needs",
)


class UserProfile(Record):
    user_id: str
    full_name: str = ""
    affiliation: str = ""
    country: str = ""
    bio: str = ""
    phone: str = ""
    website: str = ""
    orcid: str = ""
    research_interests: str = ""
    academic_title: str = ""
    participation_type: str = ""
    dietary_requirements: str = ""
    accommodation_needs: str = ""
