"""Manual smoke test: generate one recipe from a video URL using the real model.

Usage: python scripts/generate_recipe.py https://youtu.be/<id>
"""
import json
import os
import sys

from dotenv import find_dotenv, load_dotenv

from plated.services.errors import ServiceError
from plated.services.gemini_client import GeminiClient
from plated.services.normalize import draft_warnings, normalize
from plated.services.prompt import build_prompt
from plated.services.video_urls import classify


def main(url: str) -> int:
    env_path = find_dotenv()
    if not env_path:
        raise FileNotFoundError(".env not found. Create one at the project root.")
    load_dotenv(dotenv_path=env_path)

    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise ValueError(f"GEMINI_API_KEY is not set in {env_path}")

    ref = classify(url)
    print(f"Platform: {ref.platform.value}  asset: {ref.asset_id}")
    if not ref.is_supported:
        print("Unsupported platform")
        return 1

    client = GeminiClient(api_key=api_key, model_name=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))
    print("Sending prompt to the model...")
    try:
        raw_text = client.invoke(build_prompt(ref))
        draft = normalize(raw_text)
    except ServiceError as e:
        print(f"\n{e.kind}: {e}")
        return 1

    print("\n--- Recipe (JSON) ---")
    print(json.dumps(draft.to_dict(), indent=2, ensure_ascii=False))
    for warning in draft_warnings(draft):
        print(f"warning: {warning}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(main(sys.argv[1]))
