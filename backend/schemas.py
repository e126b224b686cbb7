"""
PDSCC Schemas

Pydantic models for every structured value crossing a boundary:
  - AI flow outputs, checked right after the model call
  - request bodies for public forms and admin screens, checked before
    any external call or database write
"""

import datetime
from typing import Annotated, List, Literal, Optional

from dateutil import parser as date_parser
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, field_validator

EventCategory = Literal['Music', 'Food', 'Dance', 'Cultural']
BlogStatus = Literal['Draft', 'Published', 'Scheduled']
SponsorLevel = Literal['Diamond', 'Gold', 'Silver', 'Bronze', 'Other']


def _check_url(value):
    if value and not (value.startswith('http://') or value.startswith('https://')):
        raise ValueError('Please enter a valid URL.')
    return value


def _parse_date(value):
    """Accept date objects or admin-entered strings ('2025-04-13', 'April 13, 2025', ISO timestamps)"""
    if isinstance(value, datetime.datetime):
        return value.date()
    if value is None or isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        if not value.strip():
            raise ValueError('Date is required.')
        try:
            return date_parser.parse(value).date()
        except (ValueError, OverflowError):
            raise ValueError(f'Invalid date: {value}')
    return value


AdminDate = Annotated[datetime.date, BeforeValidator(_parse_date)]
UrlField = Annotated[str, AfterValidator(_check_url)]


class _Strict(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# =========================================================================
# AI flow outputs
# =========================================================================

class EventDescriptions(_Strict):
    description: str = Field(..., min_length=1, max_length=150, description="Listing card blurb")
    full_description: str = Field(..., min_length=1, description="Event page body")


class GeneratedBlogPost(_Strict):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, description="HTML body")


class SocialPosts(_Strict):
    twitter_post: str = Field(..., min_length=1, max_length=280)
    facebook_post: str = Field(..., min_length=1)


class EventHighlights(_Strict):
    highlights: List[str] = Field(..., min_length=3, max_length=4)

    @field_validator('highlights')
    @classmethod
    def highlights_not_blank(cls, value):
        if any(not item.strip() for item in value):
            raise ValueError('Highlights must not be empty.')
        return value


class BoothPlacement(_Strict):
    suggested_location: str = Field(..., min_length=1)
    reasoning: str = Field(..., min_length=1)


# =========================================================================
# Flow inputs
# =========================================================================

class EventDescriptionsRequest(_Strict):
    prompt: str = Field(..., min_length=1)


class SocialPostsRequest(_Strict):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)


class HighlightsRequest(_Strict):
    event_name: str = Field(..., min_length=1)
    event_description: str = Field(..., min_length=1)


class BoothPlacementRequest(_Strict):
    booth_type: str = Field(..., min_length=1)
    product_description: str = Field(..., min_length=1)
    event: str = Field(..., min_length=1)


class ChatMessage(_Strict):
    role: Literal['user', 'model']
    content: str = Field(..., min_length=1)


class ChatRequest(_Strict):
    history: List[ChatMessage] = Field(..., min_length=1)


class WelcomeEmailRequest(_Strict):
    email: EmailStr
    name: Optional[str] = None
    phone: Optional[str] = None
    sms_consent: bool = False


class ContactInquiry(_Strict):
    name: str = Field(..., min_length=1)
    email: EmailStr
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class VendorApplicationRequest(_Strict):
    name: str = Field(..., min_length=1)
    organization: Optional[str] = None
    email: EmailStr
    phone: str = Field(..., min_length=1)
    booth_type: str = Field(..., min_length=1)
    total_price: float = Field(..., ge=0)
    product_description: str = Field(..., min_length=1)
    zelle_sender_name: str = Field(..., min_length=1)
    zelle_date_sent: str = Field(..., min_length=1)
    payment_confirmed: bool = False


class PerformanceApplicationRequest(_Strict):
    group_name: str = Field(..., min_length=1)
    contact_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    event: str = Field(..., min_length=1)
    performance_type: str = Field(..., min_length=1)
    participants: int = Field(..., gt=0)
    audition_link: Optional[UrlField] = None
    special_requests: Optional[str] = None


class SponsorshipInquiry(_Strict):
    company_name: str = Field(..., min_length=1)
    contact_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    sponsorship_level: str = Field(..., min_length=1)
    message: Optional[str] = None
    sms_consent: bool = False


class VolunteerInquiry(_Strict):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    interests: List[str] = Field(..., min_length=1)
    message: Optional[str] = None
    sms_consent: bool = False


class DonationReceiptRequest(_Strict):
    donor_name: str = Field(..., min_length=1)
    donor_email: EmailStr
    amount: float = Field(..., gt=0)
    date: AdminDate
    is_monthly: bool = False


class CheckDonationNotice(_Strict):
    donor_name: str = Field(..., min_length=1)
    donor_email: EmailStr
    amount: float = Field(..., gt=0)
    check_number: Optional[str] = None


class VolunteerLetterRequest(_Strict):
    volunteer_name: str = Field(..., min_length=1)
    volunteer_email: EmailStr
    event_name: str = Field(..., min_length=1)
    date_of_service: AdminDate
    hours_volunteered: float = Field(..., gt=0)
    duties_description: Optional[str] = None


class GeneralVendorRegistration(_Strict):
    business_name: str = Field(..., min_length=1)
    contact_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=10)
    category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=10, max_length=300)


class RaffleRegistration(_Strict):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=10)
    sms_consent: bool = False


# =========================================================================
# Admin forms
# =========================================================================

class EventForm(_Strict):
    name: str = Field(..., min_length=1)
    slug: Optional[str] = None
    date: AdminDate
    time: Optional[str] = None
    location_name: Optional[str] = None
    location_address: Optional[str] = None
    category: EventCategory
    description: str = Field(..., min_length=1, max_length=150)
    full_description: str = Field(..., min_length=1)
    image: Optional[UrlField] = None


class BlogPostForm(_Strict):
    title: str = Field(..., min_length=1)
    slug: Optional[str] = None
    author: str = Field(..., min_length=1)
    date: AdminDate
    image: Optional[UrlField] = None
    excerpt: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    status: BlogStatus = 'Published'


class ScheduledBlogForm(_Strict):
    topic: str = Field(..., min_length=10)
    author: str = Field('PDSCC Team', min_length=1)
    publish_date: AdminDate
    image: Optional[UrlField] = None


class SponsorForm(_Strict):
    name: str = Field(..., min_length=1)
    logo: UrlField = Field(..., min_length=1)
    level: SponsorLevel
    website: Optional[UrlField] = None


class TeamMemberForm(_Strict):
    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    image: Optional[UrlField] = None
    bio: Optional[str] = None
    order: int = 0


class StaffLoginRequest(_Strict):
    role: Literal['volunteer', 'performances']
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
