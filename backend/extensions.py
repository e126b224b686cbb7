"""
PDSCC Service Container
Builds every client and service once per process. The Flask app keeps the
container in app.extensions['pdscc']; the cron script builds its own.
"""

from ai_client import AIClient
from auth import IdentityVerifier, StaffAuth
from content_automation import ContentAutomation
from database import Database
from email_config import EmailService
from flows_content import ContentFlows
from flows_email import EmailFlows
from services_blog import BlogService, ScheduledBlogService
from services_events import EventService
from services_performances import PerformanceApplicationService
from services_sponsors import SponsorService
from services_subscribers import SubscriberService
from services_team import TeamService
from services_vendors import VendorApplicationService

EXTENSION_KEY = 'pdscc'


class AppServices:
    def __init__(self, settings: dict, database=None, ai_client=None, email_service=None,
                 identity=None, staff_auth=None, clock=None):
        self.settings = settings
        site_base_url = settings.get('SITE_BASE_URL') or 'https://www.azpdscc.org'

        self.database = database or Database(settings['DATABASE_URL'])
        self.ai = ai_client or AIClient.from_settings(settings)
        self.email = email_service or EmailService.from_settings(settings)
        self.identity = identity or IdentityVerifier.from_settings(settings)
        self.staff_auth = staff_auth or StaffAuth.from_settings(settings)

        self.events = EventService(self.database)
        self.blog = BlogService(self.database)
        self.scheduled_blog = ScheduledBlogService(self.database, clock=clock)
        self.sponsors = SponsorService(self.database)
        self.team = TeamService(self.database)
        self.vendors = VendorApplicationService(self.database)
        self.subscribers = SubscriberService(self.database)
        self.performances = PerformanceApplicationService(self.database)

        self.content_flows = ContentFlows(self.ai, event_service=self.events, site_base_url=site_base_url)
        self.email_flows = EmailFlows(
            self.ai,
            self.email,
            subscriber_service=self.subscribers,
            vendor_service=self.vendors,
            performance_service=self.performances,
            event_service=self.events,
            site_base_url=site_base_url
        )
        self.automation = ContentAutomation(self.content_flows, self.blog, self.scheduled_blog, clock=clock)
