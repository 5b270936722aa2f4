"""
Working example: generate testimonial videos for one review.

Seeds a review with an approved consent record into the configured
database, then runs a full batch against the real speech and video APIs.
Needs ELEVENLABS_API_KEY and GROK_API_KEY in .env.
"""
import asyncio
import logging
import sys
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

sys.path.insert(0, str(Path(__file__).parent))

from proofreel.config import AppConfig, load_config
from proofreel.generation import (
    AllGenerationsFailed,
    GenerationCoordinator,
    GenerationOptions,
    PermissionDenied,
    Review,
)
from proofreel.persistence import (
    PermissionStatus,
    ReviewRecord,
    SQLitePermissionRepository,
    SQLiteReviewRepository,
    get_connection,
    transaction,
)


def create_test_review(config: AppConfig) -> Review:
    """Store a sample review with an approved consent record."""
    record = ReviewRecord(
        id="example_001",
        platform="Google",
        author="Maria G.",
        rating=5,
        text=(
            "Before I found this clinic I couldn't sleep through the night because of back pain. "
            "Their team finally solved it in three sessions. "
            "I feel like a new person and I highly recommend them to everyone!"
        ),
    )
    with transaction(get_connection(config.database_path)) as conn:
        SQLiteReviewRepository(conn).save_review(record)
        SQLitePermissionRepository(conn).record_permission(record.id, PermissionStatus.APPROVED)
    return Review.from_record(record)


async def main():
    """Run example batch."""
    print("=" * 60)
    print("TESTIMONIAL VIDEO GENERATION - EXAMPLE")
    print("=" * 60)

    config = load_config()
    config.log_status()

    review = create_test_review(config)
    options = GenerationOptions(duration_seconds=30, variation_count=3)

    async with GenerationCoordinator.from_config(config) as coordinator:
        prerequisites = await coordinator.validate_prerequisites()
        if not prerequisites["valid"]:
            for issue in prerequisites["issues"]:
                print(f"  - {issue}")
            return 1

        try:
            result = await coordinator.generate_batch(review, options)
        except PermissionDenied as e:
            print(f"\nPermission denied: {e.current_status}")
            return 1
        except AllGenerationsFailed as e:
            print(f"\nAll generations failed ({e.attempted} attempted):")
            for failure in e.failures:
                print(f"  - {failure.angle.value}: {failure.message}")
            return 1

    print(f"\nGenerated {result.success_count} video(s), {result.failed_count} failed:")
    for artifact in result.artifacts:
        print(f"  [{artifact.angle_name}] {artifact.file_path} ({artifact.file_size_bytes} bytes)")
    for failure in result.failures:
        print(f"  [FAILED {failure.angle.value}] {failure.message}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
