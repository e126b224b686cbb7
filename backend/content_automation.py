"""
PDSCC Content Automation
The weekly AI-written draft post and the scheduled-topic publishing pass.
Both run synchronously inside the request (or cron process) that calls them.
"""

import logging
from datetime import datetime, timezone

from schemas import BlogPostForm
from errors import PDSCCError

logger = logging.getLogger(__name__)

WEEKLY_TOPICS = [
    'The significance of Vaisakhi in the diaspora',
    'Exploring the different styles of Bhangra',
    'The history and importance of Teeyan Da Mela for Punjabi women',
    'How to tie a traditional Sikh turban (Dastar)',
    'The community spirit of a Langar',
    'The meaning behind popular Punjabi folk songs',
    'Celebrating Lohri: A winter festival of warmth and joy',
    'The role of sports in the Phoenix Desi community',
    'A guide to traditional Punjabi wedding ceremonies',
    'The impact of Punjabi immigration in Arizona',
]

AUTOMATED_AUTHOR = 'PDSCC Automated Writer'
PLACEHOLDER_IMAGE = 'https://placehold.co/800x400.png'


def topic_for_date(day, topics=WEEKLY_TOPICS) -> str:
    """Same ISO week, same topic"""
    return topics[day.isocalendar()[1] % len(topics)]


class ContentAutomation:
    def __init__(self, content_flows, blog_service, scheduled_blog_service, clock=None):
        self.flows = content_flows
        self.blog = blog_service
        self.scheduled = scheduled_blog_service
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def today(self):
        return self._clock().date()

    def run_automated_weekly_post(self) -> dict:
        """
        Generate this week's post and save it as a Draft for admin review.

        Returns:
            dict: {'success', 'message', 'post_id'?, 'post_title'?}
        """
        today = self.today()
        topic = topic_for_date(today)
        logger.info(f"Generating weekly post for topic: {topic}")

        try:
            generated = self.flows.generate_blog_post(topic)
            post = self.blog.create_post(BlogPostForm(
                title=generated.title,
                slug=generated.slug,
                author=AUTOMATED_AUTHOR,
                date=today,
                image=PLACEHOLDER_IMAGE,
                excerpt=generated.excerpt,
                content=generated.content,
                status='Draft'
            ))
        except Exception as e:
            logger.error(f"Automated post generation failed: {e}", exc_info=not isinstance(e, PDSCCError))
            return {
                'success': False,
                'message': f'Automated post generation failed: {e}'
            }

        logger.info(f"Successfully created draft post with ID: {post['id']}")
        return {
            'success': True,
            'message': 'Successfully generated and saved a new draft post.',
            'post_id': post['id'],
            'post_title': post['title']
        }

    def process_scheduled_posts(self) -> dict:
        """
        Publish every due scheduled topic.

        Each entry is claimed (Pending -> Processing) before generation, so
        concurrent passes never publish the same entry twice. A claim left
        behind by a pass that died expires after CLAIM_LEASE and is retaken.
        A failed entry is marked Error and the pass moves on.

        Returns:
            dict: {'processed': int, 'published': [blog post ids], 'failed': [scheduled ids]}
        """
        summary = {'processed': 0, 'published': [], 'failed': []}

        for entry in self.scheduled.list_due(self.today()):
            if not self.scheduled.claim(entry['id']):
                logger.info(f"Scheduled post {entry['id']} already claimed, skipping")
                continue

            summary['processed'] += 1
            try:
                generated = self.flows.generate_blog_post(entry['topic'])
                post_id = self.scheduled.complete(entry['id'], generated)
            except Exception as e:
                logger.error(f"Failed to publish scheduled post {entry['id']}: {e}")
                self.scheduled.mark_error(entry['id'], str(e))
                summary['failed'].append(entry['id'])
                continue

            if post_id:
                summary['published'].append(post_id)
            else:
                logger.warning(f"Scheduled post {entry['id']} disappeared before it could be published")

        if summary['processed']:
            logger.info(f"Scheduled posts pass: {summary}")
        return summary
