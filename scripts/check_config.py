#!/usr/bin/env python3
"""Quick script to verify the text backend and Text-to-Speech setup.

Usage:
    python scripts/check_config.py
"""

import asyncio

from parley.config import get_settings
from parley.services.llm.generator import ResponseGenerator, create_text_backend
from parley.services.llm.protocol import ConversationTurn, Role
from parley.services.tts import resolve_tts_service


async def check_text_backend() -> bool:
    settings = get_settings()
    print(f"Testing {settings.llm_provider} text backend...")

    generator = ResponseGenerator(create_text_backend(settings))
    try:
        reply = await generator.generate(
            "You are a friendly meeting assistant.",
            [ConversationTurn(role=Role.USER, content="Say hello in one sentence.")],
        )
        print(f"✓ Got response: {reply[:100]}")
        return True
    except Exception as e:
        print(f"✗ Text backend error: {e}")
        return False
    finally:
        await generator.close()


async def check_tts() -> bool:
    print("\nTesting Google Cloud Text-to-Speech...")

    service = resolve_tts_service()
    if service is None:
        print("- Not configured, responses will be text-only")
        return True

    try:
        audio, metadata = await service.synthesize("Hello from Parley.")
        print(f"✓ Synthesized {len(audio)} bytes with {metadata.voice}")
        return True
    except Exception as e:
        print(f"✗ TTS error: {e}")
        return False
    finally:
        await service.close()


async def main():
    print("=" * 50)
    print("Parley Configuration Check")
    print("=" * 50)

    results = [await check_text_backend(), await check_tts()]

    print("\n" + "=" * 50)
    print("All checks passed!" if all(results) else "Some checks failed.")


if __name__ == "__main__":
    asyncio.run(main())
