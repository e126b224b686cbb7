"""
PDSCC Content Flows
Prompt templates and structured-output calls for the admin content tools
and the public chatbot. Every flow either returns its full validated result
or raises (AINotConfiguredError, AIProviderError, FlowValidationError).
"""

import logging

from schemas import (
    BoothPlacement,
    EventDescriptions,
    EventHighlights,
    GeneratedBlogPost,
    SocialPosts,
)

logger = logging.getLogger(__name__)

ORG_CONTEXT = (
    "PDSCC (Phoenix Desi Sports and Cultural Club) is a non-profit organization that serves "
    "the Phoenix Indian community and AZ Desis, celebrating North Indian culture through "
    "sports and festivals."
)

JSON_ONLY = "You must respond ONLY with strict JSON and nothing else."

CHAT_FALLBACK = "I'm not sure about that. For specific questions, it's best to contact the PDSCC team directly."

CHAT_HISTORY_LIMIT = 10


class ContentFlows:
    """AI content generation used by the admin screens, automation and chatbot"""

    def __init__(self, ai_client, event_service=None, site_base_url: str = 'https://www.azpdscc.org'):
        self.ai = ai_client
        self.events = event_service
        self.site_base_url = site_base_url.rstrip('/')

    # ----- Event copy -----

    def generate_event_descriptions(self, prompt: str) -> EventDescriptions:
        system_prompt = (
            "You are an expert event marketer for a community organization (PDSCC). "
            f"{ORG_CONTEXT} {JSON_ONLY}"
        )
        user_prompt = (
            "Your task is to write compelling descriptions for an event based on a simple prompt.\n\n"
            "The tone should be vibrant, welcoming, and community-focused. The descriptions should appeal "
            "to the Phoenix Indian community and AZ Desis.\n\n"
            f"Prompt: \"{prompt}\"\n\n"
            "Generate two descriptions:\n"
            "1. A short, catchy description for an event listing card (max 150 characters).\n"
            "2. A full, detailed description for the event's dedicated page (at least 50 words), "
            "elaborating on the activities, atmosphere, and what makes the event special.\n\n"
            "OUTPUT FORMAT:\n"
            "Return ONLY valid JSON with this exact structure:\n"
            "{\n"
            '  "description": "short description here",\n'
            '  "full_description": "full description here"\n'
            "}"
        )
        return self.ai.complete_json('generate_event_descriptions', system_prompt, user_prompt,
                                     EventDescriptions, temperature=0.7)

    def generate_social_posts(self, name: str, description: str, date: str, slug: str) -> SocialPosts:
        event_url = f"{self.site_base_url}/events/{slug}"
        system_prompt = (
            "You are a social media marketing expert for a community organization called PDSCC, "
            f"which serves the Phoenix Indian community. {JSON_ONLY}"
        )
        user_prompt = (
            "Your task is to generate exciting and engaging social media posts to announce a new event.\n\n"
            "Event Details:\n"
            f"- Name: {name}\n"
            f"- Date: {date}\n"
            f"- Description: {description}\n"
            f"- Link: {event_url}\n\n"
            "Generate two posts:\n"
            "1. Twitter Post: concise, under 280 characters, energetic. Include the link and hashtags like "
            "#PDSCC #PhoenixIndianCommunity #ArizonaEvents #[EventName] (e.g., #Diwali).\n"
            "2. Facebook/Instagram Post: more descriptive and engaging, with emojis. Encourage interaction "
            "(e.g., \"Tag a friend you want to go with!\"). Include the event link and a similar set of hashtags.\n\n"
            "The tone should be celebratory, professional, and welcoming.\n\n"
            "Return ONLY valid JSON: {\"twitter_post\": \"...\", \"facebook_post\": \"...\"}"
        )
        return self.ai.complete_json('generate_social_posts', system_prompt, user_prompt,
                                     SocialPosts, temperature=0.8)

    def generate_event_highlights(self, event_name: str, event_description: str) -> EventHighlights:
        system_prompt = f"You write short, catchy event highlights for PDSCC. {JSON_ONLY}"
        user_prompt = (
            "Based on the event name and description, generate a list of 3-4 unique and exciting highlights. "
            "These should be short, catchy phrases that would attract attendees.\n\n"
            f"Event Name: \"{event_name}\"\n"
            f"Event Description: \"{event_description}\"\n\n"
            "Return the output as a JSON object with a single key \"highlights\" which is an array of strings."
        )
        return self.ai.complete_json('generate_event_highlights', system_prompt, user_prompt,
                                     EventHighlights, temperature=0.8)

    def suggest_booth_placement(self, booth_type: str, product_description: str, event: str) -> BoothPlacement:
        system_prompt = f"You are an expert event planner specializing in vendor booth placement. {JSON_ONLY}"
        user_prompt = (
            "Given the following information about a vendor's booth, suggest an ideal location within "
            "the event venue and explain your reasoning.\n\n"
            f"Booth Type: {booth_type}\n"
            f"Product Description: {product_description}\n"
            f"Event: {event}\n\n"
            "Consider foot traffic, proximity to related vendors, and the overall event layout.\n\n"
            "Return ONLY valid JSON: {\"suggested_location\": \"...\", \"reasoning\": \"...\"}"
        )
        return self.ai.complete_json('suggest_booth_placement', system_prompt, user_prompt,
                                     BoothPlacement, temperature=0.7)

    # ----- Blog -----

    def generate_blog_post(self, topic: str) -> GeneratedBlogPost:
        system_prompt = f"You are an expert content creator for PDSCC. {ORG_CONTEXT} {JSON_ONLY}"
        user_prompt = (
            "Write a complete, engaging, and SEO-friendly blog post based on the provided topic.\n\n"
            f"Topic: \"{topic}\"\n\n"
            "Instructions:\n"
            "1. Tone: warm, welcoming, informative, and community-focused.\n"
            "2. Keywords: naturally incorporate \"PDSCC\", \"Phoenix Indian community\", \"AZ Desis\" and "
            "\"Arizona Indian festivals\" where relevant.\n"
            "3. Title: a catchy title (max 70 characters).\n"
            "4. Slug: a URL-friendly slug generated from the title.\n"
            "5. Excerpt: a concise summary (max 160 characters).\n"
            "6. Content: the full post (minimum 300 words) with an introduction, multiple body paragraphs "
            "and a conclusion, formatted with HTML tags such as <p> and <h2>.\n"
            "7. Always connect the post back to the mission or activities of PDSCC.\n\n"
            "Return ONLY valid JSON with the keys \"title\", \"slug\", \"excerpt\" and \"content\"."
        )
        return self.ai.complete_json('generate_blog_post', system_prompt, user_prompt,
                                     GeneratedBlogPost, temperature=0.9)

    # ----- Chatbot -----

    def _upcoming_events_context(self) -> str:
        if not self.events:
            return "No event information is available."
        upcoming = self.events.list_upcoming(limit=10)
        if not upcoming:
            return "There are no upcoming events scheduled right now. Direct users to the Events page."
        lines = []
        for event in upcoming:
            location = ', '.join(p for p in (event.get('location_name'), event.get('location_address')) if p)
            lines.append(
                f"- {event['name']}: {event['date_display']}"
                f"{', ' + event['time'] if event.get('time') else ''}"
                f"{' at ' + location if location else ''}"
            )
        return "\n".join(lines)

    def chat(self, history) -> str:
        """
        Answer the latest message in `history`.

        Args:
            history: list of ChatMessage (role 'user' or 'model')
        """
        system_prompt = (
            "You are an AI assistant for the PDSCC website.\n"
            "- Your goal is to answer user questions about PDSCC events, vendors, performances, and sponsorships.\n"
            "- For event dates, times, or locations, answer only from the UPCOMING EVENTS list below.\n"
            "- For vendor setup times, inform them to arrive 2 hours before the event start time.\n"
            "- For vendor canopy questions, direct them to the 'Vendors' page for booth options.\n"
            "- For performance application status, tell them the cultural team will contact them after "
            "review and direct them to the 'Perform' page.\n"
            f"- If you do not know an answer, say \"{CHAT_FALLBACK}\"\n"
            "- Keep answers concise.\n\n"
            f"UPCOMING EVENTS:\n{self._upcoming_events_context()}"
        )
        messages = [
            {"role": "assistant" if msg.role == 'model' else "user", "content": msg.content}
            for msg in history[-CHAT_HISTORY_LIMIT:]
        ]
        return self.ai.complete_text('chat', system_prompt, messages, temperature=0.3)
