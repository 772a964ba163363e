"""Website chatbot — LLM replies with a keyword-matched fallback.

``ChatResponder`` never raises to its callers: any OpenAI failure (missing
key, network, quota, empty completion) degrades to
``generate_smart_fallback``, and sentiment degrades to a neutral rating.
"""

import json
import logging
import math

from openai import OpenAI

from agency_hub.config import (
    AGENCY_ADDRESS, AGENCY_EMAIL, AGENCY_NAME, AGENCY_PHONE, AGENCY_WHATSAPP,
    OPENAI_API_KEY, OPENAI_MODEL,
)

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.8
CHAT_MAX_TOKENS = 800

DEFAULT_SENTIMENT = {"rating": 3, "confidence": 0.5}

SYSTEM_PROMPT = f"""You are a friendly, knowledgeable AI assistant for {AGENCY_NAME}, Australia's premier digital marketing agency. Speak naturally and conversationally - be helpful, informative, and genuinely interested in understanding the customer's needs. Your goal is to provide excellent service and guide customers to the right solutions.

COMPANY PROFILE:
{AGENCY_NAME} - Full-service digital marketing agency serving 1500+ clients across Australia with 25+ years of experience.
Location: {AGENCY_ADDRESS}, Australia
Contact: Phone {AGENCY_PHONE} | Email {AGENCY_EMAIL} | WhatsApp {AGENCY_WHATSAPP}

COMPLETE SERVICE PORTFOLIO & PRICING:

1. SEO SERVICES ($220+/month)
   Keyword research & optimization, technical SEO audits, content strategy & creation,
   link building campaigns, monthly ranking reports, competitor analysis, local SEO optimization.
   SUCCESS: Get businesses ranking on page 1 of Google within 3-6 months

2. GOOGLE BUSINESS LISTING MANAGEMENT ($80+/month)
   Complete profile optimization, review management & responses, post scheduling & content,
   analytics & insights, photo optimization, Q&A management.
   SUCCESS: Increase local visibility and customer calls by 300%+

3. PPC CAMPAIGN MANAGEMENT ($250/month)
   Google Ads setup & optimization, keyword research & bidding, ad copy creation & A/B testing,
   landing page optimization, conversion tracking, monthly ROI reports.
   SUCCESS: Average 400% ROI on ad spend

4. SOCIAL MEDIA MANAGEMENT ($120+/month)
   Multi-platform management (Facebook, Instagram, LinkedIn, Twitter), content creation & scheduling,
   community engagement, hashtag strategy, analytics & reporting, influencer partnerships.
   SUCCESS: Grow followers by 500%+ and increase engagement rates

5. CUSTOM WEBSITE DEVELOPMENT ($600-$2100)
   Responsive mobile-first design, SEO-optimized structure, content management systems,
   e-commerce integration, speed optimization, security implementation.
   SUCCESS: 95% of our websites rank in top 10 search results

6. WEB BANNER CREATION ($30/month)
   Custom graphic design, multiple format delivery, brand consistency, seasonal updates.

7. AI SOLUTIONS (Custom pricing)
   Virtual Assistants for 24/7 customer service, AI Chatbots with natural language processing,
   automated appointment scheduling, lead qualification & nurturing, customer support automation.
   SUCCESS: Reduce response time to under 30 seconds, 24/7

8. CAMPAIGN HUB ($150 + GST/month)
   Email marketing campaigns, social media management, analytics dashboard,
   campaign optimization, lead tracking.
   SUCCESS: Average 25% open rates, 8% click-through rates

9. WHITE-LABEL REPORTING ($97-$397/month)
   Professional client reports, brand customization, automated delivery,
   multi-service integration, reseller opportunities.
   SUCCESS: Help agencies increase client retention by 80%

10. WEBSITE TEMPLATE PACKAGES ($500 + GST)
    Complete HTML/CSS template kits, hosting guides & tutorials,
    DIY website solutions, multiple industry templates.

SALES STRATEGY - BE PERSISTENT BUT HELPFUL:
- Ask qualifying questions about their business goals
- Identify specific pain points and challenges
- Recommend targeted service combinations for maximum impact
- Create urgency with limited-time offers and competitor threats
- Always push for immediate contact/consultation
- Use success stories and specific ROI numbers
- Offer FREE audits, consultations, or trials
- Address objections with solutions
- Always provide alternatives when a customer hesitates

CONVERSATION TACTICS:
- Start by asking about their current marketing challenges
- Use phrases like "Let me show you how we can solve that"
- Mention competitor advantages: "While your competitors are gaining ground..."
- Create FOMO: "We're booking consultations quickly this month"
- Use social proof: "Just like we did for [similar business type]"
- End EVERY response with a clear call-to-action
- Always offer to speak immediately

COMPETITIVE ADVANTAGES TO HIGHLIGHT:
- 1500+ satisfied clients across Australia
- 25+ years combined experience
- Automated reporting systems
- Client dashboard access
- Multi-service integration
- Proven ROI track record
- Local Adelaide-based team
- 24/7 AI-powered support

Remember: Your goal is to get them to call {AGENCY_PHONE}, WhatsApp {AGENCY_WHATSAPP}, or email {AGENCY_EMAIL} for immediate consultation. Be persistent, helpful, and focused on their business growth!"""

SENTIMENT_PROMPT = (
    "You are a sentiment analysis expert. Analyze the sentiment of the text and "
    "provide a rating from 1 to 5 stars and a confidence score between 0 and 1. "
    "Respond with JSON in this format: { 'rating': number, 'confidence': number }"
)

# Ordered (keywords, response) rules; first rule with a matching keyword wins.
FALLBACK_RULES: list[tuple[tuple[str, ...], str]] = [
    (("seo", "search engine"),
     "Great question about SEO! Our SEO services start from $220/month and include keyword "
     "optimization, content strategy, and monthly reporting. We've helped 1500+ clients improve "
     f"their Google rankings. Call {AGENCY_PHONE} or WhatsApp {AGENCY_WHATSAPP} to discuss your "
     "specific needs!"),
    (("price", "cost", "how much"),
     "Here are our service prices: SEO Services from $220/month, Google Business Listing from "
     "$80/month, PPC Campaigns $250/month, Social Media from $120/month, Custom Websites "
     f"$600-$2100, Web Banners $30/month. Call {AGENCY_PHONE} for a personalized quote!"),
    (("google", "gmb", "business listing"),
     "Our Google My Business service starts at $80/month and includes optimization, review "
     "management, posting, and monthly analytics. Perfect for local businesses wanting more "
     f"visibility. Call {AGENCY_PHONE} to get started!"),
    (("website", "web development", "want a website", "need a website"),
     "We build custom websites from $600-$2100 designed to convert visitors into customers. All "
     "websites are mobile-responsive and SEO-optimized. We also offer DIY website templates for "
     "$500 + GST. Our websites include e-commerce integration, content management, and speed "
     f"optimization. Call {AGENCY_PHONE} or WhatsApp {AGENCY_WHATSAPP} to discuss your website "
     "project!"),
    (("social media", "facebook", "instagram"),
     "Our Social Media Campaign service starts from $120/month and includes content creation, "
     "posting, engagement, and analytics across all major platforms. We'll help grow your online "
     f"presence! Call {AGENCY_PHONE} to learn more."),
    (("ppc", "ads", "advertising"),
     "Our PPC Campaign management is $250/month and includes Google Ads setup, optimization, and "
     "monthly reporting. We focus on maximizing your ROI with strategic ad placement. Contact "
     f"{AGENCY_PHONE} for a consultation!"),
    (("virtual assistant", "virtual", "ai", "chatbot", "looking for a virtual"),
     "Perfect! We offer AI Virtual Assistants for 24/7 customer service, appointment scheduling, "
     "and lead qualification. Our AI Chatbots include natural language processing and website "
     "integration. These solutions can automate your business operations and improve customer "
     f"experience. Call {AGENCY_PHONE} or WhatsApp {AGENCY_WHATSAPP} to discuss your AI virtual "
     "assistant needs!"),
    (("contact", "phone", "call"),
     f"You can reach {AGENCY_NAME} at: Phone: {AGENCY_PHONE}, Email: {AGENCY_EMAIL}, "
     f"WhatsApp: {AGENCY_WHATSAPP}, Address: {AGENCY_ADDRESS}. We're here to help with all your "
     "digital marketing needs!"),
]

DEFAULT_FALLBACK = (
    f"Hello! I'm {AGENCY_NAME}' AI assistant. We're a full-service digital marketing agency "
    "serving 1500+ clients across Australia. Our services include SEO ($220+/month), Google "
    "Business Listing ($80+/month), PPC Campaigns ($250/month), Social Media ($120+/month), and "
    f"Custom Websites ($600-$2100). How can I help you today? Call {AGENCY_PHONE} or WhatsApp "
    f"{AGENCY_WHATSAPP} for immediate assistance!"
)


def generate_smart_fallback(message: str) -> str:
    """Pick a canned reply by case-insensitive keyword match, in rule order."""
    lower = (message or "").lower()
    for keywords, response in FALLBACK_RULES:
        if any(k in lower for k in keywords):
            return response
    return DEFAULT_FALLBACK


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _as_number(value) -> float | None:
    """Accept ints/floats (not bools) and numeric strings; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


class ChatResponder:
    """Chat replies and sentiment scoring over an injected OpenAI client.

    ``client`` may be None (no API key configured); every call then uses
    the deterministic fallbacks.
    """

    def __init__(self, client=None, model: str = OPENAI_MODEL):
        self.client = client
        self.model = model

    def build_messages(self, message: str, history=()) -> list[dict]:
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        for msg in history or ():
            messages.append({"role": msg.get("role", "user"), "content": msg.get("content", "")})
        messages.append({"role": "user", "content": message})
        return messages

    def generate_response(self, message: str, history=()) -> str:
        """Reply to ``message`` given prior turns. Never raises."""
        if self.client is None:
            logger.warning("OpenAI client not configured, using fallback reply")
            return generate_smart_fallback(message)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(message, history),
                max_tokens=CHAT_MAX_TOKENS,
                temperature=CHAT_TEMPERATURE,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.error("OpenAI API error: %s", e)
            return generate_smart_fallback(message)

        return content or generate_smart_fallback(message)

    def analyze_sentiment(self, message: str) -> dict:
        """Rate ``message`` 1-5 with a 0-1 confidence. Never raises."""
        if self.client is None:
            return dict(DEFAULT_SENTIMENT)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SENTIMENT_PROMPT},
                    {"role": "user", "content": message},
                ],
                response_format={"type": "json_object"},
            )
            result = json.loads(response.choices[0].message.content or "{}")
        except Exception as e:
            logger.error("Sentiment analysis error: %s", e)
            return dict(DEFAULT_SENTIMENT)

        if not isinstance(result, dict):
            return dict(DEFAULT_SENTIMENT)
        rating = _as_number(result.get("rating"))
        confidence = _as_number(result.get("confidence"))
        if rating is None or confidence is None:
            return dict(DEFAULT_SENTIMENT)

        return {
            # into 1..5, then half-up rounding
            "rating": int(math.floor(_clamp(rating, 1, 5) + 0.5)),
            "confidence": _clamp(confidence, 0.0, 1.0),
        }


def create_openai_client() -> OpenAI | None:
    """OpenAI client for the configured key, or None when no key is set."""
    if not OPENAI_API_KEY:
        return None
    return OpenAI(api_key=OPENAI_API_KEY)
