"""
PDSCC Events Service
Data access for the events collection.
"""

import logging
from datetime import datetime, timezone

from database import Event
from errors import NotFoundError
from slug_utils import generate_unique_slug

logger = logging.getLogger(__name__)


def today_utc():
    return datetime.now(timezone.utc).date()


class EventService:
    def __init__(self, database):
        self.database = database

    def list_events(self, order: str = 'asc', upcoming_only: bool = False, category: str = None):
        """List events by date; `order` is 'asc' or 'desc'"""
        with self.database.session() as db:
            query = db.query(Event)
            if upcoming_only:
                query = query.filter(Event.date >= today_utc())
            if category and category != 'all':
                query = query.filter(Event.category == category)
            if order == 'desc':
                query = query.order_by(Event.date.desc(), Event.name.asc())
            else:
                query = query.order_by(Event.date.asc(), Event.name.asc())
            return [e.to_dict() for e in query.all()]

    def list_upcoming(self, limit: int = None):
        events = self.list_events(order='asc', upcoming_only=True)
        return events[:limit] if limit else events

    def next_event_name(self, default: str = 'our upcoming PDSCC event') -> str:
        upcoming = self.list_upcoming(limit=1)
        return upcoming[0]['name'] if upcoming else default

    def get_event(self, event_id: str):
        with self.database.session() as db:
            event = db.query(Event).filter(Event.id == event_id).first()
            return event.to_dict() if event else None

    def get_event_by_slug(self, slug: str):
        with self.database.session() as db:
            event = db.query(Event).filter(Event.slug == slug).first()
            return event.to_dict() if event else None

    def create_event(self, form) -> dict:
        """Create an event from a validated EventForm"""
        with self.database.session() as db:
            event = Event(
                slug=generate_unique_slug(form.name, Event, db, preferred=form.slug),
                name=form.name,
                date=form.date,
                time=form.time,
                location_name=form.location_name,
                location_address=form.location_address,
                category=form.category,
                description=form.description,
                full_description=form.full_description,
                image=form.image
            )
            db.add(event)
            db.commit()
            db.refresh(event)
            logger.info(f"Created event {event.id} ({event.slug})")
            return event.to_dict()

    def update_event(self, event_id: str, form) -> dict:
        with self.database.session() as db:
            event = db.query(Event).filter(Event.id == event_id).first()
            if not event:
                raise NotFoundError('Event', event_id)

            if form.slug or form.name != event.name:
                event.slug = generate_unique_slug(form.name, Event, db, exclude_id=event.id, preferred=form.slug)
            event.name = form.name
            event.date = form.date
            event.time = form.time
            event.location_name = form.location_name
            event.location_address = form.location_address
            event.category = form.category
            event.description = form.description
            event.full_description = form.full_description
            event.image = form.image

            db.commit()
            db.refresh(event)
            logger.info(f"Updated event {event.id}")
            return event.to_dict()

    def delete_event(self, event_id: str):
        with self.database.session() as db:
            event = db.query(Event).filter(Event.id == event_id).first()
            if not event:
                raise NotFoundError('Event', event_id)
            db.delete(event)
            db.commit()
            logger.info(f"Deleted event {event_id}")
