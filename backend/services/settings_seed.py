"""Default site settings and the insert-only seeder that loads them.

Existing keys are skipped, never overwritten, so re-running the seeder only
adds settings that are missing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from sqlalchemy import select

from backend.models import SiteSetting
from backend.models.base import async_session_factory

logger = logging.getLogger("nbm.seed")

DEFAULT_SETTINGS: list[dict[str, Any]] = [
    {
        "key": "site_info",
        "category": "general",
        "value": {
            "siteName": "Never Before Marketing",
            "tagline": "Elevate Your Brand with Stunning Visuals",
            "description": "Professional motion graphics and animation services",
            "logo": "/assets/logo.svg",
            "favicon": "/assets/favicon.ico",
        },
        "is_public": True,
        "description": "Basic site information displayed in header and meta tags",
    },
    {
        "key": "contact_info",
        "category": "general",
        "value": {
            "email": "hello@neverbeforemarketing.com",
            "phone": "+1 (555) 123-4567",
            "address": "123 Creative Street, Design City, DC 12345",
            "socialLinks": {
                "instagram": "https://instagram.com/neverbeforemarketing",
                "linkedin": "https://linkedin.com/company/neverbeforemarketing",
                "youtube": "https://youtube.com/@neverbeforemarketing",
                "twitter": "https://twitter.com/nbmarketing",
            },
        },
        "is_public": True,
        "description": "Contact information and social media links",
    },
    {
        "key": "hero_section",
        "category": "sections",
        "value": {
            "title": "Elevate Your Brand with Stunning Visuals",
            "subtitle": "Professional motion graphics and animation services that bring your vision to life",
            "ctaText": "View Our Work",
            "ctaLink": "/projects",
            "backgroundVideo": "/assets/hero-bg.mp4",
        },
        "is_public": True,
        "description": "Hero section content on homepage",
    },
    {
        "key": "motion_graphics_section",
        "category": "sections",
        "value": {
            "title": "Motion Graphics",
            "description": "Dynamic animations and visual effects that captivate your audience",
            "showcaseCount": 6,
            "tags": ["2D Animation", "Logo Animation", "Explainer Videos", "Social Media Content"],
        },
        "is_public": True,
        "description": "Motion graphics section configuration",
    },
    {
        "key": "animations_section",
        "category": "sections",
        "value": {
            "title": "3D Animations",
            "description": "Cutting-edge 3D animations and product visualizations",
            "showcaseCount": 6,
            "tags": ["3D Modeling", "Product Visualization", "Character Animation", "Architectural Visualization"],
        },
        "is_public": True,
        "description": "3D animations section configuration",
    },
    {
        "key": "clients_section",
        "category": "sections",
        "value": {
            "title": "Trusted by Leading Brands",
            "logos": [
                {"name": f"Client {n}", "logo": f"/assets/clients/client{n}.svg"}
                for n in range(1, 7)
            ],
        },
        "is_public": True,
        "description": "Client logos section",
    },
    {
        "key": "softwares_section",
        "category": "sections",
        "value": {
            "title": "Industry-Leading Tools",
            "items": [
                {"name": "Adobe After Effects", "icon": "/assets/software/after-effects.svg"},
                {"name": "Cinema 4D", "icon": "/assets/software/cinema4d.svg"},
                {"name": "Blender", "icon": "/assets/software/blender.svg"},
                {"name": "Adobe Premiere Pro", "icon": "/assets/software/premiere.svg"},
                {"name": "DaVinci Resolve", "icon": "/assets/software/davinci.svg"},
                {"name": "Houdini", "icon": "/assets/software/houdini.svg"},
            ],
        },
        "is_public": True,
        "description": "Software/tools used section",
    },
    {
        "key": "strategy_section",
        "category": "sections",
        "value": {
            "title": "Our Strategy",
            "content": {
                "introduction": "We follow a proven process to deliver exceptional results",
                "steps": [
                    {
                        "title": "Discovery",
                        "description": "Understanding your brand, goals, and target audience",
                        "icon": "\U0001F50D",
                    },
                    {
                        "title": "Concept",
                        "description": "Developing creative concepts that align with your vision",
                        "icon": "\U0001F4A1",
                    },
                    {
                        "title": "Production",
                        "description": "Bringing ideas to life with cutting-edge techniques",
                        "icon": "\U0001F3AC",
                    },
                    {
                        "title": "Delivery",
                        "description": "Final polish and delivery in your preferred format",
                        "icon": "✨",
                    },
                ],
            },
        },
        "is_public": True,
        "description": "Strategy/process section content",
    },
    {
        "key": "mission_section",
        "category": "sections",
        "value": {
            "title": "Our Mission",
            "content": (
                "At Never Before Marketing, we're passionate about creating visual experiences "
                "that leave lasting impressions. Our team of talented artists and animators "
                "combines creativity with technical expertise to deliver motion graphics and "
                "animations that elevate your brand and engage your audience."
            ),
            "image": "/assets/mission-image.jpg",
        },
        "is_public": True,
        "description": "Mission/about section content",
    },
    {
        "key": "showcase_config",
        "category": "showcase",
        "value": {
            "homepageCardCount": 8,
            "motionGraphicsCount": 12,
            "animationsCount": 12,
            "autoplay": True,
            "showTags": True,
        },
        "is_public": True,
        "description": "Showcase display configuration (card counts, features)",
    },
    {
        "key": "email_settings",
        "category": "email",
        "value": {
            "smtp_host": "smtp.gmail.com",
            "smtp_port": 587,
            "from_email": "hello@neverbeforemarketing.com",
            "from_name": "Never Before Marketing",
        },
        "is_public": False,
        "description": "Email configuration (private)",
    },
    {
        "key": "feature_flags",
        "category": "features",
        "value": {
            "enableContactForm": True,
            "enableNewsletter": True,
            "enableBlog": False,
            "enableTestimonials": False,
            "maintenanceMode": False,
        },
        "is_public": True,
        "description": "Feature toggle flags",
    },
]


@dataclass(frozen=True)
class SeedResult:
    created: int
    skipped: int
    total: int


async def seed_site_settings(settings: Iterable[Mapping[str, Any]] = DEFAULT_SETTINGS) -> SeedResult:
    """Insert every setting whose key is not stored yet. Commits per key."""
    settings = list(settings)
    logger.info("Processing %d settings", len(settings))

    created = 0
    skipped = 0
    async with async_session_factory() as session:
        for setting in settings:
            result = await session.execute(
                select(SiteSetting.id).where(SiteSetting.key == setting["key"]).limit(1)
            )
            if result.scalar_one_or_none() is not None:
                logger.info("Setting already exists, skipping: %s", setting["key"])
                skipped += 1
                continue

            session.add(
                SiteSetting(
                    key=setting["key"],
                    category=setting["category"],
                    value=setting["value"],
                    is_public=setting["is_public"],
                    description=setting.get("description"),
                )
            )
            await session.commit()
            logger.info("Created: %s (%s)", setting["key"], setting["category"])
            created += 1

    return SeedResult(created=created, skipped=skipped, total=len(settings))
