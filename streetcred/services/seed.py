"""
Sample landmark projects for empty installations.
"""

import logging
from typing import Optional

from streetcred.schemas.project import ProjectFields, ProjectRecord
from streetcred.storage.base import StorageBackend

logger = logging.getLogger(__name__)

SAMPLE_PROJECTS: list[dict] = [
    {
        "name": "Burj Khalifa",
        "location": "Dubai, UAE",
        "description": (
            "Standing at 828 meters, Burj Khalifa is the world's tallest building. "
            "This architectural marvel features 163 floors above ground and took 6 years "
            "to construct, showcasing the pinnacle of modern engineering and design."
        ),
        "image_url": "https://images.unsplash.com/photo-1505228395891-9a51e7e86e81?w=800",
        "category": "Skyscraper",
        "completion_year": 2010,
    },
    {
        "name": "Shanghai Tower",
        "location": "Shanghai, China",
        "description": (
            "Shanghai Tower is a 632-meter supertall skyscraper featuring a unique twisted "
            "design that reduces wind loads. It houses offices, hotels, and observation "
            "decks with stunning views of the Pudong skyline."
        ),
        "image_url": "https://images.unsplash.com/photo-1513635269975-59663e0ac1ad?w=800",
        "category": "Skyscraper",
        "completion_year": 2015,
    },
    {
        "name": "Marina Bay Sands",
        "location": "Singapore",
        "description": (
            "Marina Bay Sands is an integrated resort featuring three 55-story towers topped "
            "by a SkyPark. The design includes the world's largest rooftop infinity pool and "
            "has become Singapore's most recognizable landmark."
        ),
        "image_url": "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=800",
        "category": "Hotel & Casino",
        "completion_year": 2010,
    },
    {
        "name": "Changi Airport Jewel",
        "location": "Singapore",
        "description": (
            "Changi Airport's Jewel is a nature-themed entertainment complex featuring the "
            "world's tallest indoor waterfall, the Rain Vortex, under a glass dome."
        ),
        "image_url": "https://images.unsplash.com/photo-1552321554-5fefe8c9ef14?w=800",
        "category": "Airport",
        "completion_year": 2019,
    },
    {
        "name": "Tokyo Skytree",
        "location": "Tokyo, Japan",
        "description": (
            "Tokyo Skytree stands at 634 meters as Japan's tallest structure. This "
            "broadcasting tower combines traditional Japanese aesthetics with modern "
            "technology and offers panoramic views of Tokyo."
        ),
        "image_url": "https://images.unsplash.com/photo-1540959375944-7049f642e9a0?w=800",
        "category": "Tower",
        "completion_year": 2012,
    },
    {
        "name": "Dubai Downtown District",
        "location": "Dubai, UAE",
        "description": (
            "Dubai Downtown is a large-scale urban development centered around the Burj "
            "Khalifa, with shopping, dining, and entertainment venues."
        ),
        "image_url": "https://images.unsplash.com/photo-1518162165786-8a9f0b3d9f1b?w=800",
        "category": "Urban Development",
        "completion_year": 2020,
    },
    {
        "name": "Hong Kong-Zhuhai-Macau Bridge",
        "location": "Pearl River Delta, China",
        "description": (
            "The Hong Kong-Zhuhai-Macau Bridge is the world's longest sea crossing at 55 "
            "kilometers, including undersea tunnels and artificial islands."
        ),
        "image_url": "https://images.unsplash.com/photo-1449824913935-59a10b8d2000?w=800",
        "category": "Bridge",
        "completion_year": 2018,
    },
]


async def seed_sample_projects(
    storage: StorageBackend,
    owner_id: Optional[str] = None,
) -> list[ProjectRecord]:
    """Insert every sample project and return the created records."""
    created = []
    for sample in SAMPLE_PROJECTS:
        created.append(
            await storage.create_project(ProjectFields(**sample), owner_id=owner_id)
        )
    logger.info(f"Seeded {len(created)} sample projects")
    return created
