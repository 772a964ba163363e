"""Metrics sources — where report numbers come from.

Report generation asks a ``MetricsSource`` for the metrics, summary and
recommendations of one (client, service, month). ``RandomMetricsSource``
produces placeholder figures inside fixed ranges until a real analytics
integration replaces it; nothing in orchestration or delivery depends on
which source is plugged in.
"""

import random
from typing import Protocol

SERVICE_TYPES = ("seo", "ppc", "gmb", "social", "chatbot")

RECOMMENDATIONS: dict[str, list[str]] = {
    "seo": [
        "Continue optimizing for target keywords",
        "Focus on building quality backlinks",
        "Improve page loading speed for better user experience",
        "Create more content around high-performing keywords",
    ],
    "ppc": [
        "Test new ad copy variations to improve CTR",
        "Expand successful campaigns to increase volume",
        "Optimize landing pages for better conversion rates",
        "Review and refine keyword bidding strategies",
    ],
    "gmb": [
        "Respond to every new review within 48 hours",
        "Publish at least one Google post per week",
        "Add fresh photos of your premises and team",
        "Keep opening hours and holiday hours up to date",
    ],
    "social": [
        "Post consistently during peak engagement hours",
        "Create more video content for better engagement",
        "Engage with followers' comments promptly",
        "Use trending hashtags relevant to your industry",
    ],
    "chatbot": [
        "Train chatbot on more specific product questions",
        "Add more conversation flows for common inquiries",
        "Implement appointment booking functionality",
        "Set up follow-up sequences for qualified leads",
    ],
}

CHATBOT_TOP_QUESTIONS = [
    "What are your business hours?",
    "How can I contact you?",
    "What services do you offer?",
    "Can you provide a quote?",
    "Where are you located?",
]


class MetricsSource(Protocol):
    def fetch(self, client: dict, service_type: str, month: str) -> dict:
        """Return ``{"metrics", "summary", "recommendations"}`` for one report."""
        ...


class RandomMetricsSource:
    """Placeholder metrics drawn uniformly from per-field ranges."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def fetch(self, client: dict, service_type: str, month: str) -> dict:
        builder = getattr(self, f"_{service_type}", None)
        if service_type not in SERVICE_TYPES or builder is None:
            raise ValueError(f"Unknown service type: {service_type}")
        metrics, summary = builder()
        return {
            "metrics": metrics,
            "summary": summary,
            "recommendations": list(RECOMMENDATIONS[service_type]),
        }

    def _int(self, low: int, span: int) -> int:
        """Integer in [low, low + span)."""
        return self.rng.randrange(low, low + span)

    def _dec(self, low: float, span: float, places: int = 2) -> str:
        return f"{self.rng.uniform(low, low + span):.{places}f}"

    def _seo(self) -> tuple[dict, dict]:
        metrics = {
            "organicTraffic": self._int(2000, 5000),
            "keywordRankings": {
                "topTen": self._int(5, 15),
                "topThree": self._int(2, 8),
                "firstPage": self._int(10, 25),
            },
            "backlinks": self._int(100, 50),
            "technicalScore": self._int(80, 20),
        }
        summary = {
            "trafficGrowth": f"{self._int(10, 30)}%",
            "rankingImprovements": self._int(5, 10),
            "issuesFixed": self._int(2, 5),
        }
        return metrics, summary

    def _ppc(self) -> tuple[dict, dict]:
        metrics = {
            "impressions": self._int(20000, 50000),
            "clicks": self._int(800, 2000),
            "conversions": self._int(50, 100),
            "spend": self._int(1000, 2000),
            "cpc": self._dec(1, 3),
            "ctr": self._dec(2, 5),
            "conversionRate": self._dec(3, 8),
        }
        summary = {
            "roi": f"{self._int(150, 200)}%",
            "costPerConversion": self._dec(20, 50),
            "qualityScore": self._dec(7, 3, places=1),
        }
        return metrics, summary

    def _gmb(self) -> tuple[dict, dict]:
        new_reviews = self._int(2, 12)
        metrics = {
            "views": {
                "search": self._int(1500, 3000),
                "maps": self._int(500, 1500),
            },
            "actions": {
                "calls": self._int(40, 120),
                "directions": self._int(30, 90),
                "websiteClicks": self._int(60, 200),
            },
            "reviews": {
                "total": self._int(40, 160) + new_reviews,
                "newThisMonth": new_reviews,
                "averageRating": self._dec(4, 1, places=1),
            },
            "posts": self._int(4, 6),
        }
        summary = {
            "viewGrowth": f"{self._int(5, 25)}%",
            "callGrowth": f"{self._int(5, 30)}%",
        }
        return metrics, summary

    def _social(self) -> tuple[dict, dict]:
        metrics = {
            "followers": {
                "facebook": self._int(500, 1000),
                "instagram": self._int(300, 800),
                "linkedin": self._int(200, 500),
            },
            "engagement": {
                "likes": self._int(200, 500),
                "comments": self._int(50, 100),
                "shares": self._int(30, 80),
            },
            "reach": self._int(5000, 10000),
            "impressions": self._int(10000, 20000),
        }
        summary = {
            "followerGrowth": f"{self._int(5, 15)}%",
            "engagementRate": f"{self._dec(3, 5, places=1)}%",
            "topPostReach": self._int(1000, 2000),
        }
        return metrics, summary

    def _chatbot(self) -> tuple[dict, dict]:
        metrics = {
            "totalConversations": self._int(200, 500),
            "averageSessionLength": f"{self._int(3, 5)}:{self._int(0, 60):02d}",
            "leadsGenerated": self._int(20, 50),
            "satisfactionScore": self._dec(3.5, 1.5, places=1),
            "topQuestions": list(CHATBOT_TOP_QUESTIONS),
        }
        summary = {
            "responseRate": f"{self._int(90, 10)}%",
            "resolutionRate": f"{self._int(75, 20)}%",
            "leadConversionRate": f"{self._int(10, 15)}%",
        }
        return metrics, summary
