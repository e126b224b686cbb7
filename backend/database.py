"""
PDSCC Database Models and Connection
Each model is one flat collection: no foreign keys, no relationships,
no cross-collection transactions.
"""

from sqlalchemy import create_engine, Column, Integer, String, Boolean, Date, DateTime, Float, Text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from datetime import datetime, timezone
import uuid
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()

EVENT_CATEGORIES = ('Music', 'Food', 'Dance', 'Cultural')
BLOG_STATUSES = ('Draft', 'Published', 'Scheduled')
SCHEDULED_STATUSES = ('Pending', 'Processing', 'Error')
SPONSOR_LEVELS = ('Diamond', 'Gold', 'Silver', 'Bronze', 'Other')
CHECK_IN_PENDING = 'pending'
CHECK_IN_DONE = 'checkedIn'


def _new_id():
    return uuid.uuid4().hex


def _utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class Event(Base):
    """Community event shown on the public events pages"""
    __tablename__ = 'events'
    slug_prefix = 'event'

    id = Column(String(32), primary_key=True, default=_new_id)
    slug = Column(String(255), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(50), nullable=True)
    location_name = Column(String(255), nullable=True)
    location_address = Column(String(500), nullable=True)
    category = Column(String(50), nullable=True, index=True)
    description = Column(String(500), nullable=False)
    full_description = Column(Text, nullable=False)
    image = Column(String(500), nullable=True)

    def to_dict(self):
        """Convert event to dictionary"""
        return {
            'id': self.id,
            'slug': self.slug,
            'name': self.name,
            'date': _iso(self.date),
            'date_display': self.date.strftime('%B %d, %Y') if self.date else None,
            'time': self.time,
            'location_name': self.location_name,
            'location_address': self.location_address,
            'category': self.category,
            'description': self.description,
            'full_description': self.full_description,
            'image': self.image
        }


class BlogPost(Base):
    """Blog article; only Published posts are publicly visible"""
    __tablename__ = 'blog_posts'
    slug_prefix = 'post'

    id = Column(String(32), primary_key=True, default=_new_id)
    slug = Column(String(255), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    excerpt = Column(String(500), nullable=False, default='')
    content = Column(Text, nullable=False, default='')  # HTML
    image = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default='Draft', index=True)

    def to_dict(self):
        """Convert blog post to dictionary"""
        return {
            'id': self.id,
            'slug': self.slug,
            'title': self.title,
            'author': self.author,
            'date': _iso(self.date),
            'date_display': self.date.strftime('%B %d, %Y') if self.date else None,
            'excerpt': self.excerpt,
            'content': self.content,
            'image': self.image,
            'status': self.status
        }


class ScheduledBlogPost(Base):
    """Admin-entered topic waiting to be turned into a published post"""
    __tablename__ = 'scheduled_blog_posts'

    id = Column(String(32), primary_key=True, default=_new_id)
    topic = Column(String(500), nullable=False)
    author = Column(String(255), nullable=False, default='PDSCC Team')
    publish_date = Column(Date, nullable=False, index=True)
    image = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default='Pending', index=True)
    error_message = Column(Text, nullable=True)
    claimed_at = Column(DateTime, nullable=True)  # naive UTC, set when a pass takes the entry
    created_at = Column(DateTime, default=_utcnow)

    def to_dict(self):
        """Convert scheduled post to dictionary"""
        return {
            'id': self.id,
            'topic': self.topic,
            'author': self.author,
            'publish_date': _iso(self.publish_date),
            'image': self.image,
            'status': self.status,
            'error_message': self.error_message,
            'claimed_at': _iso(self.claimed_at),
            'created_at': _iso(self.created_at)
        }


class Sponsor(Base):
    """Sponsor shown on the home page and sponsorship page"""
    __tablename__ = 'sponsors'

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    logo = Column(String(500), nullable=False)
    level = Column(String(20), nullable=False, default='Other')
    website = Column(String(500), nullable=True)

    def to_dict(self):
        """Convert sponsor to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'logo': self.logo,
            'level': self.level,
            'website': self.website
        }


class TeamMember(Base):
    """Board/team member shown on the about page"""
    __tablename__ = 'team_members'

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False)
    image = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    order = Column(Integer, default=0, index=True)

    def to_dict(self):
        """Convert team member to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'role': self.role,
            'image': self.image,
            'bio': self.bio,
            'order': self.order
        }


class VendorApplication(Base):
    """Vendor booth application; the id doubles as the QR check-in ticket"""
    __tablename__ = 'vendor_applications'

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    organization = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    booth_type = Column(String(100), nullable=False)
    total_price = Column(Float, nullable=True)
    product_description = Column(Text, nullable=True)
    check_in_status = Column(String(20), nullable=False, default=CHECK_IN_PENDING, index=True)
    created_at = Column(DateTime, default=_utcnow)
    checked_in_at = Column(DateTime, nullable=True)

    def to_dict(self):
        """Convert vendor application to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'organization': self.organization,
            'email': self.email,
            'phone': self.phone,
            'booth_type': self.booth_type,
            'total_price': self.total_price,
            'product_description': self.product_description,
            'check_in_status': self.check_in_status,
            'created_at': _iso(self.created_at),
            'checked_in_at': _iso(self.checked_in_at)
        }


class Subscriber(Base):
    """Newsletter subscriber; the email address is the primary key"""
    __tablename__ = 'subscribers'

    email = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    sms_consent = Column(Boolean, default=False)
    subscribed_at = Column(DateTime, default=_utcnow)

    def to_dict(self):
        """Convert subscriber to dictionary"""
        return {
            'email': self.email,
            'name': self.name,
            'phone': self.phone,
            'sms_consent': self.sms_consent,
            'subscribed_at': _iso(self.subscribed_at)
        }


class PerformanceApplication(Base):
    """Application from a group wanting to perform at an event"""
    __tablename__ = 'performance_applications'

    id = Column(String(32), primary_key=True, default=_new_id)
    group_name = Column(String(255), nullable=False)
    event = Column(String(255), nullable=False)
    contact_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    performance_type = Column(String(100), nullable=False)
    participants = Column(Integer, nullable=True)
    audition_link = Column(String(500), nullable=True)
    special_requests = Column(Text, nullable=True)
    submitted_at = Column(DateTime, default=_utcnow, index=True)

    def to_dict(self):
        """Convert performance application to dictionary"""
        return {
            'id': self.id,
            'group_name': self.group_name,
            'event': self.event,
            'contact_name': self.contact_name,
            'email': self.email,
            'phone': self.phone,
            'performance_type': self.performance_type,
            'participants': self.participants,
            'audition_link': self.audition_link,
            'special_requests': self.special_requests,
            'submitted_at': _iso(self.submitted_at)
        }


class Database:
    """
    Database client owned by the process entry point.

    Constructed once by the application factory (or a test) and handed to
    every service, so nothing in the codebase reaches for a module-level engine.
    """

    def __init__(self, url: str):
        self.url = url
        engine_kwargs = {}
        if 'sqlite' in url:
            engine_kwargs['connect_args'] = {'check_same_thread': False}
            if url in ('sqlite://', 'sqlite:///:memory:'):
                # in-memory databases only exist on one connection
                engine_kwargs['poolclass'] = StaticPool
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    def init_db(self):
        """Initialize database - create all tables"""
        try:
            Base.metadata.create_all(bind=self.engine, checkfirst=True)
            logger.info("Database initialized successfully")
        except Exception as e:
            # Handle race condition where multiple workers try to create tables simultaneously
            if "already exists" in str(e).lower() or "duplicate" in str(e).lower():
                logger.info("Database tables already exist (race condition handled)")
            else:
                raise

    @contextmanager
    def session(self):
        """Session scope that rolls back on error and always closes"""
        db = self.SessionLocal()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self):
        self.engine.dispose()
