import os
import sys
import json
import logging
import argparse
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..pipeline.eye_color_analyzer import analyze_eye_color
from ..repositories.image_repository import ImageDecodeError, ImageRepository

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Estimate the iris color of close-up eye photos and print a JSON report per image."
    )
    parser.add_argument("images", nargs="+", help="Eye photos (JPEG, PNG, WebP, ...)")
    parser.add_argument("--compact", action="store_true", help="One-line JSON instead of indented output")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    _configure_logging()

    failures = 0
    for path in args.images:
        try:
            data = ImageRepository.read_bytes(path)
            report = analyze_eye_color(data)
        except (FileNotFoundError, ImageDecodeError) as err:
            logger.error(f"Skipping {path}: {err}")
            failures += 1
            continue

        payload = {"image": str(path), **report.to_dict()}
        print(json.dumps(payload, indent=None if args.compact else 2))

    if failures:
        logger.warning(f"{failures} of {len(args.images)} images could not be analyzed")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
