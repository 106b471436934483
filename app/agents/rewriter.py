from __future__ import annotations

import asyncio
import time
from typing import Any

from app.config import settings
from app.llm_client import call_timeout, get_model, response_text, response_usage
from app.models.errors import RewriteFailedError
from app.models.pipeline import Deadline, RewriteOutcome
from app.services import logger as log_service
from app.services.chunker import split_content
from app.services.logger import logger
from app.services.prompt_store import render_prompt
from app.tools import web_utils


class Rewriter:
    """Applies the research digest to the post via the LLM.

    Content at or under the threshold goes out in one call. Larger content is
    chunked at headings and each chunk is rewritten on its own; a chunk that
    fails keeps its original text.
    """

    name = "rewriter"

    def __init__(
        self,
        client: Any,
        *,
        model: str | None = None,
        threshold: int | None = None,
        chunk_delay_seconds: float | None = None,
        chunk_digest_max_chars: int | None = None,
    ):
        self.client = client
        self.model = model or get_model()
        self.threshold = max(int(threshold or settings.rewrite_chunk_threshold), 1)
        self.chunk_delay_seconds = (
            settings.chunk_delay_seconds if chunk_delay_seconds is None else chunk_delay_seconds
        )
        self.chunk_digest_max_chars = int(chunk_digest_max_chars or settings.chunk_digest_max_chars)

    async def _call(self, caller: str, system: str, prompt: str, deadline: Deadline) -> str:
        t0 = time.monotonic()
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=settings.rewrite_max_tokens,
                timeout=call_timeout(deadline),
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            log_service.log_llm_call(
                model=self.model,
                caller=caller,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                error=str(e),
            )
            raise

        input_tokens, output_tokens = response_usage(response)
        log_service.log_llm_call(
            model=self.model,
            caller=caller,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        return web_utils.strip_code_fences(response_text(response))

    async def rewrite(
        self,
        content: str,
        digest: str,
        writing_instructions: str | None,
        deadline: Deadline,
    ) -> RewriteOutcome:
        system = (writing_instructions or "").strip() or render_prompt("rewriter.system_default")
        if len(content) <= self.threshold:
            return await self._rewrite_single(content, digest, system, deadline)
        return await self._rewrite_chunked(content, digest, system, deadline)

    async def _rewrite_single(
        self,
        content: str,
        digest: str,
        system: str,
        deadline: Deadline,
    ) -> RewriteOutcome:
        prompt = render_prompt(
            "rewriter.single_pass",
            digest=digest,
            content=content,
            rules=render_prompt("rewriter.rules"),
        )
        try:
            rewritten = await self._call(f"{self.name}.single", system, prompt, deadline)
        except Exception as e:
            raise RewriteFailedError(f"Rewrite failed: {e}") from e
        if not rewritten:
            raise RewriteFailedError("Rewrite returned no content")
        return RewriteOutcome(content=rewritten, llm_calls=1, chunks_total=1, chunks_rewritten=1)

    async def _rewrite_chunked(
        self,
        content: str,
        digest: str,
        system: str,
        deadline: Deadline,
    ) -> RewriteOutcome:
        chunks = split_content(content, self.threshold)
        chunk_digest = web_utils.truncate(digest, self.chunk_digest_max_chars)
        rules = render_prompt("rewriter.rules")
        outcome = RewriteOutcome(content="", chunks_total=len(chunks))
        logger.info(f"Rewriting {len(content)} chars in {len(chunks)} chunks")

        parts: list[str] = []
        for index, chunk in enumerate(chunks):
            if index > 0 and self.chunk_delay_seconds > 0:
                await asyncio.sleep(self.chunk_delay_seconds)
            if deadline.expired():
                remaining = chunks[index:]
                outcome.chunks_skipped = len(remaining)
                parts.extend(remaining)
                logger.warning(
                    f"Rewrite deadline reached at chunk {index + 1}/{len(chunks)}; "
                    f"passing {len(remaining)} chunks through unchanged"
                )
                break

            outcome.llm_calls += 1
            prompt = render_prompt(
                "rewriter.chunk",
                index=index + 1,
                total=len(chunks),
                digest=chunk_digest,
                content=chunk,
                rules=rules,
            )
            try:
                rewritten = await self._call(f"{self.name}.chunk", system, prompt, deadline)
            except Exception as e:
                logger.warning(f"Chunk {index + 1}/{len(chunks)} rewrite failed, keeping original: {e}")
                rewritten = ""
            if rewritten:
                outcome.chunks_rewritten += 1
                # Model output is stripped; keep the separator the chunk had.
                parts.append(rewritten + chunk[len(chunk.rstrip()):])
            else:
                outcome.chunks_failed += 1
                parts.append(chunk)

        outcome.content = "".join(parts)
        return outcome
