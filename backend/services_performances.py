"""
PDSCC Performance Applications Service
"""

import logging

from database import PerformanceApplication

logger = logging.getLogger(__name__)


class PerformanceApplicationService:
    def __init__(self, database):
        self.database = database

    def create_application(self, application) -> dict:
        with self.database.session() as db:
            record = PerformanceApplication(
                group_name=application.group_name,
                event=application.event,
                contact_name=application.contact_name,
                email=str(application.email),
                phone=application.phone,
                performance_type=application.performance_type,
                participants=application.participants,
                audition_link=application.audition_link,
                special_requests=application.special_requests
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            logger.info(f"Saved performance application {record.id} from {record.group_name}")
            return record.to_dict()

    def list_applications(self):
        """Newest submissions first"""
        with self.database.session() as db:
            records = db.query(PerformanceApplication).order_by(PerformanceApplication.submitted_at.desc()).all()
            return [r.to_dict() for r in records]
