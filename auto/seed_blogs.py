#!/usr/bin/env python3
"""
Seed Blog Posts Script.

Clears the blog collection and inserts a set of sample posts through the
repository, so every post gets a derived slug, zeroed counters and timestamps.

Usage:
    uv run python auto/seed_blogs.py
    uv run python auto/seed_blogs.py --keep      # do not clear existing posts

Environment Variables:
    MONGODB_URI: Connection string (default: mongodb://localhost:27017)
    MONGODB_DATABASE: Database name (default: blog_api)
"""

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from asyncio import run as asyncio_run
from pathlib import Path
from sys import exit as sys_exit
from sys import path as sys_path
from time import perf_counter

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys_path.insert(0, str(project_root))

from app.configs import settings  # noqa: E402
from app.db import BlogStore  # noqa: E402
from app.errors import BaseAppError  # noqa: E402
from app.monitoring import configure_logging, get_logger  # noqa: E402
from app.repositories import BlogRepository  # noqa: E402
from app.schemas import BlogCreate  # noqa: E402
from app.utils import time_taken  # noqa: E402

logger = get_logger(__name__)

SAMPLE_BLOGS: list[dict] = [
    {
        "title": "Getting Started with Camera AI Technology",
        "content": (
            "Camera AI technology is revolutionizing how we process and understand visual data. "
            "From security systems to autonomous vehicles, this technology combines advanced "
            "machine learning algorithms with real-time image processing to create intelligent "
            "systems that can see and understand the world around them. In this comprehensive "
            "guide, we'll explore the fundamentals of camera AI, its applications, and how to "
            "get started with implementing these powerful technologies in your projects."
        ),
        "author": "Tech Team",
        "tags": ["ai", "computer-vision", "introduction", "technology"],
        "published": True,
        "featured": True,
    },
    {
        "title": "Understanding Object Detection Algorithms",
        "content": (
            "Object detection is a fundamental task in computer vision that involves identifying "
            "and locating objects within images or video streams. Modern object detection "
            "algorithms like YOLO (You Only Look Once) and R-CNN (Region-based CNN) have achieved "
            "remarkable accuracy and speed. These algorithms work by analyzing image features and "
            "using neural networks to classify and locate objects with bounding boxes. In this "
            "article, we'll dive deep into how these algorithms work, their strengths and "
            "weaknesses, and practical implementation considerations."
        ),
        "author": "AI Research Team",
        "tags": ["object-detection", "yolo", "machine-learning", "algorithms"],
        "published": True,
        "featured": False,
    },
    {
        "title": "Real-time Video Processing Techniques",
        "content": (
            "Processing video in real-time presents unique challenges that require optimized "
            "algorithms and efficient hardware utilization. This comprehensive guide covers key "
            "techniques for real-time video processing including frame buffering, parallel "
            "processing, and GPU acceleration. We'll also discuss trade-offs between processing "
            "speed and accuracy, and when to use different optimization strategies. Learn how to "
            "build systems that can handle high-resolution video streams while maintaining low "
            "latency and high throughput."
        ),
        "author": "Engineering Team",
        "tags": ["video-processing", "real-time", "optimization", "performance"],
        "published": True,
        "featured": False,
    },
    {
        "title": "Machine Learning Models for Image Classification",
        "content": (
            "Image classification is one of the most common applications of machine learning in "
            "computer vision. This article explores various neural network architectures "
            "including CNNs, ResNet, and Vision Transformers. We'll cover data preprocessing, "
            "model training, and deployment strategies. Whether you're working on medical "
            "imaging, autonomous vehicles, or general image recognition, understanding these "
            "fundamental concepts is crucial for building effective AI systems."
        ),
        "author": "Data Science Team",
        "tags": ["machine-learning", "image-classification", "neural-networks", "cnn"],
        "published": False,
        "featured": False,
    },
    {
        "title": "Edge AI: Bringing Intelligence to the Edge",
        "content": (
            "Edge AI represents a paradigm shift in how we deploy artificial intelligence, "
            "bringing computation closer to data sources. This approach reduces latency, "
            "improves privacy, and enables real-time decision making in resource-constrained "
            "environments. Learn about edge computing hardware, model optimization techniques "
            "like quantization and pruning, and best practices for deploying AI models on edge "
            "devices."
        ),
        "author": "IoT Team",
        "tags": ["edge-ai", "iot", "optimization", "deployment"],
        "published": True,
        "featured": True,
    },
]


def parse_args() -> Namespace:
    parser = ArgumentParser(
        description="Seed the blog collection with sample posts",
        formatter_class=RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing posts instead of clearing the collection first",
    )
    return parser.parse_args()


async def seed(repo: BlogRepository, *, clear: bool = True) -> int:
    """
    Insert the sample posts.

    Args:
        repo: Repository bound to the target collection.
        clear: Delete every existing post first.

    Returns:
        int: Number of posts created.
    """
    if clear:
        result = await repo.collection.delete_many({})
        logger.info("Cleared existing blog posts", deleted=result.deleted_count)

    created = 0
    for sample in SAMPLE_BLOGS:
        document = await repo.create(BlogCreate.model_validate(sample))
        logger.info("Created blog post", slug=document["slug"])
        created += 1
    return created


async def main(args: Namespace) -> int:
    start_time = perf_counter()
    store = BlogStore(settings)
    try:
        await store.connect()
        await store.ensure_indexes()
        created = await seed(BlogRepository(store.blogs, settings), clear=not args.keep)
    except BaseAppError as e:
        logger.error("Seeding failed", error=e.detail)
        return 1
    finally:
        store.close()

    logger.info("Database seeded successfully", created=created, took=time_taken(start_time))
    return 0


if __name__ == "__main__":
    configure_logging()
    sys_exit(asyncio_run(main(parse_args())))
