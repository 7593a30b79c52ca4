import asyncio
import logging
import os
import sys

# Add project root to path so we can import app
sys.path.append(os.getcwd())

from app.config.settings import settings
from app.controllers.dependencies import build_conversion_pipeline
from app.pipelines.hls import ConversionError

async def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(name)s | %(message)s")

    if len(sys.argv) < 2:
        print("Usage: python scripts/try_conversion.py <url-of-audio.mp3|wav>")
        return 1

    source_url = sys.argv[1]
    pipeline = build_conversion_pipeline(settings)

    print(f"Converting {source_url} (storage {settings.storage.address}, bucket {settings.storage.bucket})...")
    try:
        endpoint = await pipeline.convert(source_url)
    except ConversionError as e:
        print(f"\nConversion failed ({e.stage.value}): {e}")
        return 1

    print("\n--- Stream ---")
    print(endpoint.url)
    print("--------------")
    return 0

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
