"""
PDSCC Team Service
The team_members table is the only source of truth; the bundled JSON file
only fills an empty table on first start.
"""

import json
import logging
import os

from database import TeamMember
from errors import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = os.path.join(os.path.dirname(__file__), 'seed', 'team.json')


class TeamService:
    def __init__(self, database):
        self.database = database

    def list_members(self):
        with self.database.session() as db:
            members = db.query(TeamMember).order_by(TeamMember.order.asc(), TeamMember.name.asc()).all()
            return [m.to_dict() for m in members]

    def get_member(self, member_id: str):
        with self.database.session() as db:
            member = db.query(TeamMember).filter(TeamMember.id == member_id).first()
            return member.to_dict() if member else None

    def create_member(self, form) -> dict:
        with self.database.session() as db:
            member = TeamMember(
                name=form.name,
                role=form.role,
                image=form.image,
                bio=form.bio,
                order=form.order
            )
            db.add(member)
            db.commit()
            db.refresh(member)
            logger.info(f"Created team member {member.id} ({member.name})")
            return member.to_dict()

    def update_member(self, member_id: str, form) -> dict:
        with self.database.session() as db:
            member = db.query(TeamMember).filter(TeamMember.id == member_id).first()
            if not member:
                raise NotFoundError('TeamMember', member_id)
            member.name = form.name
            member.role = form.role
            member.image = form.image
            member.bio = form.bio
            member.order = form.order
            db.commit()
            db.refresh(member)
            return member.to_dict()

    def delete_member(self, member_id: str):
        with self.database.session() as db:
            member = db.query(TeamMember).filter(TeamMember.id == member_id).first()
            if not member:
                raise NotFoundError('TeamMember', member_id)
            db.delete(member)
            db.commit()
            logger.info(f"Deleted team member {member_id}")

    def seed_if_empty(self, seed_path: str = DEFAULT_SEED_PATH) -> int:
        """Load the seed file into an empty table; returns the number of rows inserted"""
        with self.database.session() as db:
            count = db.query(TeamMember).count()
            if count:
                logger.info(f"Team members already initialized ({count} members found)")
                return 0

            if not os.path.exists(seed_path):
                logger.warning(f"Team seed file not found: {seed_path}")
                return 0

            with open(seed_path, encoding='utf-8') as f:
                members = json.load(f)

            for index, data in enumerate(members):
                db.add(TeamMember(
                    name=data['name'],
                    role=data['role'],
                    image=data.get('image'),
                    bio=data.get('bio'),
                    order=data.get('order', index)
                ))
            db.commit()
            logger.info(f"Initialized {len(members)} team members from seed file")
            return len(members)
