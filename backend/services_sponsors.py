"""
PDSCC Sponsors Service
"""

import logging

from database import Sponsor, SPONSOR_LEVELS
from errors import NotFoundError

logger = logging.getLogger(__name__)

# Diamond first, unknown levels after Other
LEVEL_RANK = {level: rank for rank, level in enumerate(SPONSOR_LEVELS)}


def sponsor_sort_key(sponsor: dict):
    return (LEVEL_RANK.get(sponsor.get('level'), len(LEVEL_RANK)), (sponsor.get('name') or '').casefold())


class SponsorService:
    def __init__(self, database):
        self.database = database

    def list_sponsors(self):
        """All sponsors ordered by level rank, then name"""
        with self.database.session() as db:
            sponsors = [s.to_dict() for s in db.query(Sponsor).all()]
        return sorted(sponsors, key=sponsor_sort_key)

    def get_sponsor(self, sponsor_id: str):
        with self.database.session() as db:
            sponsor = db.query(Sponsor).filter(Sponsor.id == sponsor_id).first()
            return sponsor.to_dict() if sponsor else None

    def create_sponsor(self, form) -> dict:
        with self.database.session() as db:
            sponsor = Sponsor(
                name=form.name,
                logo=form.logo,
                level=form.level,
                website=form.website or None
            )
            db.add(sponsor)
            db.commit()
            db.refresh(sponsor)
            logger.info(f"Created sponsor {sponsor.id} ({sponsor.name})")
            return sponsor.to_dict()

    def update_sponsor(self, sponsor_id: str, form) -> dict:
        with self.database.session() as db:
            sponsor = db.query(Sponsor).filter(Sponsor.id == sponsor_id).first()
            if not sponsor:
                raise NotFoundError('Sponsor', sponsor_id)
            sponsor.name = form.name
            sponsor.logo = form.logo
            sponsor.level = form.level
            sponsor.website = form.website or None
            db.commit()
            db.refresh(sponsor)
            return sponsor.to_dict()

    def delete_sponsor(self, sponsor_id: str):
        with self.database.session() as db:
            sponsor = db.query(Sponsor).filter(Sponsor.id == sponsor_id).first()
            if not sponsor:
                raise NotFoundError('Sponsor', sponsor_id)
            db.delete(sponsor)
            db.commit()
            logger.info(f"Deleted sponsor {sponsor_id}")
