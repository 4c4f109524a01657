"""Timeout-bounded access to the generation provider.

Both the single-shot and the streaming paths share one deadline policy:
if the provider has not finished within ``timeout_seconds`` the call fails
with GenerationTimeoutError, which is distinct from ProviderError.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing

from purrpal.errors import GenerationTimeoutError, ProviderError, PurrPalError
from purrpal.logging_config import get_logger
from purrpal.protocols import GenerationProvider

logger = get_logger(__name__)

FALLBACK_MESSAGE = (
    "Maaf, saya tidak dapat memberikan jawaban saat ini. Silakan coba lagi atau "
    "konsultasikan dengan dokter hewan jika ini adalah kondisi darurat."
)

ChunkCallback = Callable[[str, str, int], None]


class ModelInvoker:
    """Wraps a GenerationProvider with a hard timeout and a safe fallback.

    Example:
        ```python
        invoker = ModelInvoker(provider, timeout_seconds=30)
        text = await invoker.generate(prompt)

        async for chunk in invoker.stream(prompt):
            print(chunk, end="")
        ```
    """

    def __init__(self, provider: GenerationProvider, timeout_seconds: float = 30.0) -> None:
        self._provider = provider
        self._timeout = timeout_seconds

    async def generate(self, prompt: str) -> str:
        """Generate a full response.

        Returns:
            The model text, or FALLBACK_MESSAGE when the provider gave no
            usable text

        Raises:
            GenerationTimeoutError: If the provider did not answer in time
            ProviderError: If the provider call failed
        """
        try:
            text = await asyncio.wait_for(self._provider.generate_once(prompt), self._timeout)
        except asyncio.TimeoutError as e:
            raise GenerationTimeoutError(
                "Response generation timeout", details=f"exceeded {self._timeout}s"
            ) from e
        except PurrPalError:
            raise
        except Exception as e:
            raise ProviderError("Generation provider failed", details=f"{type(e).__name__}: {e}") from e

        if not text or not text.strip():
            logger.warning("Provider returned no usable text, using fallback message")
            return FALLBACK_MESSAGE
        return text

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """Lazily yield non-empty chunk texts from the provider.

        The deadline covers the whole stream, not each chunk.

        Raises:
            GenerationTimeoutError: If the stream did not finish in time
            ProviderError: If the provider call failed
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout
        events = self._provider.generate_stream(prompt).__aiter__()

        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise GenerationTimeoutError(
                        "Streaming generation timeout", details=f"exceeded {self._timeout}s"
                    )
                try:
                    chunk = await asyncio.wait_for(events.__anext__(), remaining)
                except StopAsyncIteration:
                    return
                except asyncio.TimeoutError as e:
                    raise GenerationTimeoutError(
                        "Streaming generation timeout", details=f"exceeded {self._timeout}s"
                    ) from e
                except PurrPalError:
                    raise
                except Exception as e:
                    raise ProviderError(
                        "Generation provider stream failed", details=f"{type(e).__name__}: {e}"
                    ) from e

                if chunk:
                    yield chunk
        finally:
            aclose = getattr(events, "aclose", None)
            if aclose is not None:
                await aclose()

    async def generate_streaming(
        self,
        prompt: str,
        on_chunk: ChunkCallback | None = None,
    ) -> str:
        """Consume the stream, calling ``on_chunk`` for every chunk in order.

        Args:
            prompt: The instruction prompt
            on_chunk: Optional ``(chunk, accumulated_text, index)`` callback,
                called synchronously before the next chunk is read

        Returns:
            The accumulated text, or FALLBACK_MESSAGE if nothing arrived
        """
        accumulated = ""
        index = 0

        async with aclosing(self.stream(prompt)) as chunks:
            async for chunk in chunks:
                accumulated += chunk
                index += 1
                if on_chunk is not None:
                    on_chunk(chunk, accumulated, index)

        if not accumulated.strip():
            logger.warning("Stream produced no usable text, using fallback message")
            return FALLBACK_MESSAGE
        return accumulated
