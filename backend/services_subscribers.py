"""
PDSCC Subscribers Service
Newsletter subscribers keyed by email address.
"""

import logging

from sqlalchemy.exc import IntegrityError

from database import Subscriber

logger = logging.getLogger(__name__)


def normalize_email(email) -> str:
    return str(email).strip().lower()


class SubscriberService:
    def __init__(self, database):
        self.database = database

    def is_subscribed(self, email) -> bool:
        with self.database.session() as db:
            return db.query(Subscriber).filter(Subscriber.email == normalize_email(email)).first() is not None

    def add_subscriber(self, email, name: str = None, phone: str = None, sms_consent: bool = False) -> bool:
        """
        Add a subscriber.

        Returns:
            bool: True if a new row was created, False if the email was already present
        """
        with self.database.session() as db:
            db.add(Subscriber(
                email=normalize_email(email),
                name=name,
                phone=phone,
                sms_consent=bool(sms_consent)
            ))
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.info(f"Subscriber {email} already exists")
                return False
            logger.info(f"Added subscriber {email}")
            return True

    def list_subscribers(self):
        with self.database.session() as db:
            return [s.to_dict() for s in db.query(Subscriber).order_by(Subscriber.subscribed_at.desc()).all()]
