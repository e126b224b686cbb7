"""
PDSCC Vendor Applications Service
Applications are created pending and checked in exactly once at the gate.
"""

import logging
from datetime import datetime, timezone

from database import VendorApplication, CHECK_IN_PENDING, CHECK_IN_DONE
from errors import NotFoundError

logger = logging.getLogger(__name__)


class VendorApplicationService:
    def __init__(self, database):
        self.database = database

    def create_application(self, application) -> dict:
        """Persist a validated VendorApplicationRequest as a pending ticket"""
        with self.database.session() as db:
            record = VendorApplication(
                name=application.name,
                organization=application.organization,
                email=str(application.email),
                phone=application.phone,
                booth_type=application.booth_type,
                total_price=application.total_price,
                product_description=application.product_description,
                check_in_status=CHECK_IN_PENDING
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            logger.info(f"Created vendor application {record.id}")
            return record.to_dict()

    def get_application(self, application_id: str):
        with self.database.session() as db:
            record = db.query(VendorApplication).filter(VendorApplication.id == application_id).first()
            return record.to_dict() if record else None

    def list_applications(self):
        with self.database.session() as db:
            records = db.query(VendorApplication).order_by(VendorApplication.created_at.desc()).all()
            return [r.to_dict() for r in records]

    def check_in(self, application_id: str) -> dict:
        """
        Check a vendor in.

        Only a pending application is updated, so two scanners racing on the
        same ticket produce one check-in and one "already checked in" answer.

        Raises:
            NotFoundError: No application has this id
        """
        now = datetime.now(timezone.utc)
        with self.database.session() as db:
            updated = db.query(VendorApplication).filter(
                VendorApplication.id == application_id,
                VendorApplication.check_in_status == CHECK_IN_PENDING
            ).update(
                {'check_in_status': CHECK_IN_DONE, 'checked_in_at': now},
                synchronize_session=False
            )
            db.commit()

            record = db.query(VendorApplication).filter(VendorApplication.id == application_id).first()
            if not record:
                raise NotFoundError('VendorApplication', application_id)

            if updated == 1:
                logger.info(f"Vendor {application_id} checked in")
            else:
                logger.info(f"Vendor {application_id} was already checked in")

            return {
                'success': True,
                'already_checked_in': updated != 1,
                'application': record.to_dict()
            }
