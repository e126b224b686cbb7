"""
PDSCC Blog Services
Data access for blog posts and scheduled (topic-only) blog entries.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import and_, or_

from database import BlogPost, ScheduledBlogPost
from errors import NotFoundError
from slug_utils import generate_unique_slug

logger = logging.getLogger(__name__)

# How long a pass may hold an entry before another pass can take it over
CLAIM_LEASE = timedelta(minutes=15)


class BlogService:
    def __init__(self, database):
        self.database = database

    def list_posts(self, status: str = None):
        """All posts newest first, optionally only one status"""
        with self.database.session() as db:
            query = db.query(BlogPost)
            if status:
                query = query.filter(BlogPost.status == status)
            posts = query.order_by(BlogPost.date.desc(), BlogPost.title.asc()).all()
            return [p.to_dict() for p in posts]

    def list_published(self):
        return self.list_posts(status='Published')

    def get_post(self, post_id: str):
        with self.database.session() as db:
            post = db.query(BlogPost).filter(BlogPost.id == post_id).first()
            return post.to_dict() if post else None

    def get_post_by_slug(self, slug: str, published_only: bool = False):
        with self.database.session() as db:
            query = db.query(BlogPost).filter(BlogPost.slug == slug)
            if published_only:
                query = query.filter(BlogPost.status == 'Published')
            post = query.first()
            return post.to_dict() if post else None

    def create_post(self, form) -> dict:
        """Create a post from a validated BlogPostForm"""
        with self.database.session() as db:
            post = BlogPost(
                slug=generate_unique_slug(form.title, BlogPost, db, preferred=form.slug),
                title=form.title,
                author=form.author,
                date=form.date,
                excerpt=form.excerpt,
                content=form.content,
                image=form.image,
                status=form.status
            )
            db.add(post)
            db.commit()
            db.refresh(post)
            logger.info(f"Created blog post {post.id} ({post.status})")
            return post.to_dict()

    def update_post(self, post_id: str, form) -> dict:
        with self.database.session() as db:
            post = db.query(BlogPost).filter(BlogPost.id == post_id).first()
            if not post:
                raise NotFoundError('BlogPost', post_id)

            if (form.slug and form.slug != post.slug) or form.title != post.title:
                post.slug = generate_unique_slug(form.title, BlogPost, db, exclude_id=post.id, preferred=form.slug)
            post.title = form.title
            post.author = form.author
            post.date = form.date
            post.excerpt = form.excerpt
            post.content = form.content
            post.image = form.image
            post.status = form.status

            db.commit()
            db.refresh(post)
            logger.info(f"Updated blog post {post.id}")
            return post.to_dict()

    def publish_post(self, post_id: str) -> dict:
        with self.database.session() as db:
            post = db.query(BlogPost).filter(BlogPost.id == post_id).first()
            if not post:
                raise NotFoundError('BlogPost', post_id)
            post.status = 'Published'
            db.commit()
            db.refresh(post)
            logger.info(f"Published blog post {post.id}")
            return post.to_dict()

    def delete_post(self, post_id: str):
        with self.database.session() as db:
            post = db.query(BlogPost).filter(BlogPost.id == post_id).first()
            if not post:
                raise NotFoundError('BlogPost', post_id)
            db.delete(post)
            db.commit()
            logger.info(f"Deleted blog post {post_id}")


class ScheduledBlogService:
    def __init__(self, database, clock=None):
        self.database = database
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def now(self):
        """Current time as naive UTC, the form claimed_at is stored in"""
        return self._clock().astimezone(timezone.utc).replace(tzinfo=None)

    def _claim_expired(self, now):
        # Processing rows older than the lease belong to a pass that died mid-generation
        return and_(
            ScheduledBlogPost.status == 'Processing',
            or_(ScheduledBlogPost.claimed_at.is_(None), ScheduledBlogPost.claimed_at < now - CLAIM_LEASE)
        )

    def _claimable(self, now):
        return or_(ScheduledBlogPost.status == 'Pending', self._claim_expired(now))

    def list_scheduled(self):
        with self.database.session() as db:
            entries = db.query(ScheduledBlogPost).order_by(
                ScheduledBlogPost.publish_date.asc(),
                ScheduledBlogPost.created_at.asc()
            ).all()
            return [e.to_dict() for e in entries]

    def get_scheduled(self, entry_id: str):
        with self.database.session() as db:
            entry = db.query(ScheduledBlogPost).filter(ScheduledBlogPost.id == entry_id).first()
            return entry.to_dict() if entry else None

    def create_scheduled(self, form) -> dict:
        with self.database.session() as db:
            entry = ScheduledBlogPost(
                topic=form.topic,
                author=form.author,
                publish_date=form.publish_date,
                image=form.image,
                status='Pending'
            )
            db.add(entry)
            db.commit()
            db.refresh(entry)
            logger.info(f"Scheduled blog topic {entry.id} for {entry.publish_date}")
            return entry.to_dict()

    def update_scheduled(self, entry_id: str, form) -> dict:
        """Edit an entry; an edited entry goes back to Pending so a failed one can retry"""
        with self.database.session() as db:
            entry = db.query(ScheduledBlogPost).filter(ScheduledBlogPost.id == entry_id).first()
            if not entry:
                raise NotFoundError('ScheduledBlogPost', entry_id)
            stale = entry.claimed_at is None or entry.claimed_at < self.now() - CLAIM_LEASE
            if entry.status == 'Processing' and not stale:
                raise ValueError('This entry is being published right now and cannot be edited.')
            entry.topic = form.topic
            entry.author = form.author
            entry.publish_date = form.publish_date
            entry.image = form.image
            entry.status = 'Pending'
            entry.error_message = None
            entry.claimed_at = None
            db.commit()
            db.refresh(entry)
            return entry.to_dict()

    def delete_scheduled(self, entry_id: str):
        with self.database.session() as db:
            deleted = db.query(ScheduledBlogPost).filter(ScheduledBlogPost.id == entry_id).delete(
                synchronize_session=False
            )
            db.commit()
            if not deleted:
                raise NotFoundError('ScheduledBlogPost', entry_id)

    def list_due(self, today):
        """Claimable entries whose publish date is today or earlier, oldest first"""
        with self.database.session() as db:
            entries = db.query(ScheduledBlogPost).filter(
                self._claimable(self.now()),
                ScheduledBlogPost.publish_date <= today
            ).order_by(ScheduledBlogPost.publish_date.asc(), ScheduledBlogPost.created_at.asc()).all()
            return [e.to_dict() for e in entries]

    def claim(self, entry_id: str) -> bool:
        """
        Move an entry to Processing and stamp claimed_at.

        Pending entries and Processing entries whose lease ran out can be
        claimed. Returns False when another request holds (or consumed) it.
        """
        now = self.now()
        with self.database.session() as db:
            updated = db.query(ScheduledBlogPost).filter(
                ScheduledBlogPost.id == entry_id,
                self._claimable(now)
            ).update({'status': 'Processing', 'claimed_at': now}, synchronize_session=False)
            db.commit()
            return updated == 1

    def mark_error(self, entry_id: str, message: str):
        with self.database.session() as db:
            db.query(ScheduledBlogPost).filter(ScheduledBlogPost.id == entry_id).update(
                {'status': 'Error', 'error_message': message[:2000]},
                synchronize_session=False
            )
            db.commit()

    def complete(self, entry_id: str, generated) -> str:
        """
        Publish the generated post and delete the scheduled entry in one transaction.

        Args:
            entry_id: Claimed scheduled entry
            generated: GeneratedBlogPost from the blog-post flow

        Returns:
            str: New BlogPost id, or None if the entry vanished in the meantime
        """
        with self.database.session() as db:
            entry = db.query(ScheduledBlogPost).filter(
                ScheduledBlogPost.id == entry_id,
                ScheduledBlogPost.status == 'Processing'
            ).first()
            if not entry:
                return None

            post = BlogPost(
                slug=generate_unique_slug(generated.title, BlogPost, db, preferred=generated.slug),
                title=generated.title,
                author=entry.author,
                date=entry.publish_date,
                excerpt=generated.excerpt,
                content=generated.content,
                image=entry.image,
                status='Published'
            )
            db.add(post)

            deleted = db.query(ScheduledBlogPost).filter(
                ScheduledBlogPost.id == entry_id,
                ScheduledBlogPost.status == 'Processing'
            ).delete(synchronize_session=False)
            if deleted != 1:
                db.rollback()
                return None

            db.commit()
            logger.info(f"Published scheduled topic {entry_id} as blog post {post.id}")
            return post.id
