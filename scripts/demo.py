#!/usr/bin/env python3
"""
Demo script for the PurrPal chatbot.

Sends a few sample cat-care questions (normal, serious and emergency) through
the full pipeline, then shows streaming, a cache hit and the metrics.

Requires GEMINI_API_KEY in the environment (or LLM_PROVIDER=ollama with a
running Ollama server).
"""

import asyncio

from purrpal.config import get_settings
from purrpal.entities import StreamChunk
from purrpal.errors import PurrPalError
from purrpal.logging_config import setup_logging
from purrpal.services import PurrPalChatbot

SAMPLE_QUERIES = [
    "Halo PurrPal!",
    "Kucing saya tidak mau makan sejak kemarin, apa yang harus saya lakukan?",
    "Kucing saya muntah darah!",
    "Bagaimana cara merawat kucing yang sedang hamil?",
]


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_queries(chatbot: PurrPalChatbot) -> None:
    """Send the sample questions one by one."""
    print_section("Sample Questions")

    for query in SAMPLE_QUERIES:
        print(f"\n👤 {query}")
        response = await chatbot.generate_response(query, session_id="demo")
        if response.success:
            print(f"🐱 [{response.urgency_level.value}] {response.message[:300]}")
            for recommendation in response.recommendations or []:
                print(f"   → {recommendation}")
            print(f"   ⏱  {response.response_time_ms:.0f}ms (cached={response.cached})")
        else:
            print(f"❌ {response.error_code}: {response.message}")


async def demo_cache(chatbot: PurrPalChatbot) -> None:
    """Ask the same question twice to show a cache hit."""
    print_section("Response Cache")

    query = SAMPLE_QUERIES[3]
    for attempt in (1, 2):
        response = await chatbot.generate_response(query)
        if response.success:
            print(f"  Attempt {attempt}: cached={response.cached}, {response.response_time_ms:.0f}ms")


async def demo_streaming(chatbot: PurrPalChatbot) -> None:
    """Stream an answer chunk by chunk."""
    print_section("Streaming")

    def on_chunk(event: StreamChunk) -> None:
        print(event.chunk, end="", flush=True)

    response = await chatbot.generate_streaming_response(
        "Apa makanan terbaik untuk anak kucing?",
        session_id="demo-stream",
        on_chunk=on_chunk,
    )
    print()
    if not response.success:
        print(f"❌ {response.error_code}: {response.message}")


async def main() -> None:
    settings = get_settings()
    setup_logging("WARNING", settings.log_file)

    chatbot = PurrPalChatbot.create(settings)
    try:
        await chatbot.initialize()
    except PurrPalError as e:
        print(f"❌ Could not initialize PurrPal: {e}")
        return

    try:
        await demo_queries(chatbot)
        await demo_cache(chatbot)
        await demo_streaming(chatbot)

        print_section("Metrics")
        for name, value in chatbot.get_metrics().model_dump().items():
            print(f"  {name}: {value}")
    finally:
        await chatbot.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
