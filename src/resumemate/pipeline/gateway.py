"""Resilience Gateway - the single entry point for document generation.

Wraps the generation source with a circuit breaker, a fixed slot pool, a
hard per-attempt timeout and a bounded retry loop. Any failure falls back
to the deterministic source; both paths go through the same assembly
(quality gate, no-injection guard, score booster, final quality gate), so
the caller always receives a document plus provenance metadata.
"""

from __future__ import annotations

import asyncio
import logging
import time

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from resumemate.config import AppConfig
from resumemate.errors import (
    AuthError,
    GenerationError,
    SaturationError,
    ServiceTimeoutError,
)
from resumemate.models.document import TailoredDocument
from resumemate.models.gateway import GatewayHealth, GatewayResult, Provenance
from resumemate.models.profile import CandidateProfile, TargetProfile
from resumemate.pipeline.circuit_breaker import CircuitBreaker, CircuitState, SlotPool
from resumemate.pipeline.fallback_generator import DeterministicGenerationSource
from resumemate.pipeline.generation_source import GenerationSource
from resumemate.pipeline.quality_gate import repair
from resumemate.pipeline.score_booster import boost
from resumemate.pipeline.scorer import score_document
from resumemate.pipeline.skill_guard import enforce_no_injection
from resumemate.pipeline.structural_validator import validate_document

logger = logging.getLogger(__name__)

# User-facing fallback reasons. Raw provider errors never reach the result.
REASON_CIRCUIT_OPEN = "AI service temporarily unavailable. Using fast draft mode."
REASON_NOT_CONFIGURED = "AI service not configured. Using fast draft mode."
REASON_BUSY = "Server is busy generating other resumes. Using fast draft mode."
REASON_ERROR = "AI generation encountered an issue. Using fast draft; try again later for full AI polish."


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, GenerationError) and exc.retryable


class ResilienceGateway:
    """Owns the circuit and slot state for one process."""

    def __init__(
        self,
        source: GenerationSource,
        fallback: GenerationSource | None = None,
        config: AppConfig | None = None,
        *,
        clock=time.time,
    ):
        self.config = config or AppConfig()
        gw = self.config.gateway
        self.source = source
        self.fallback = fallback or DeterministicGenerationSource()
        self.breaker = CircuitBreaker(
            window=gw.failure_window_seconds,
            threshold=gw.failure_threshold,
            open_duration=gw.open_duration_seconds,
            clock=clock,
        )
        self.slots = SlotPool(gw.max_concurrent)

    async def generate(
        self,
        candidate: CandidateProfile,
        target: TargetProfile,
        resume_text: str = "",
        job_text: str = "",
        *,
        timeout: float | None = None,
    ) -> GatewayResult:
        """Generate a tailored document. Never raises a generation error."""
        start = time.monotonic()
        args = (candidate, target, resume_text, job_text)

        if not self.breaker.allow_request():
            logger.info("Circuit open; returning fallback")
            return await self._fallback(*args, reason=REASON_CIRCUIT_OPEN, start=start)
        is_probe = self.breaker.state is CircuitState.HALF_OPEN

        if not self.source.available:
            self.breaker.release_probe()
            mock = getattr(self.source, "mock", False)
            logger.info("Generation source %s; returning fallback", "in mock mode" if mock else "unavailable")
            return await self._fallback(*args, reason=None if mock else REASON_NOT_CONFIGURED, start=start)

        try:
            self.slots.acquire()
        except SaturationError:
            self.breaker.release_probe()
            logger.info("All %d generation slots busy; returning fallback", self.slots.capacity)
            return await self._fallback(*args, reason=REASON_BUSY, start=start)

        try:
            try:
                document = await self._attempt(*args, timeout=timeout)
            finally:
                self.slots.release()
        except asyncio.CancelledError:
            if is_probe:
                self.breaker.release_probe()
            raise
        except AuthError:
            logger.critical("Generation service rejected credentials; check ANTHROPIC_API_KEY")
            self.breaker.record_failure()
            return await self._fallback(*args, reason=REASON_ERROR, start=start)
        except GenerationError as e:
            logger.error("Generation failed after retries: %s", e)
            self.breaker.record_failure()
            return await self._fallback(*args, reason=REASON_ERROR, start=start)
        except Exception:
            logger.exception("Unexpected generation failure")
            self.breaker.record_failure()
            return await self._fallback(*args, reason=REASON_ERROR, start=start)

        self.breaker.record_success()
        try:
            return self._assemble(document, candidate, target, Provenance.LLM, None, start)
        except Exception:
            logger.exception("Assembling generated document failed")
            return await self._fallback(*args, reason=REASON_ERROR, start=start)

    async def _attempt(
        self,
        candidate: CandidateProfile,
        target: TargetProfile,
        resume_text: str,
        job_text: str,
        *,
        timeout: float | None,
    ) -> TailoredDocument:
        gw = self.config.gateway
        limit = timeout if timeout is not None else gw.timeout_seconds

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(gw.max_attempts),
            retry=retry_if_exception(_is_retryable),
            wait=wait_exponential(multiplier=gw.retry_backoff, max=10),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                concise = attempt.retry_state.attempt_number > 1
                try:
                    raw = await asyncio.wait_for(
                        self.source.invoke(candidate, target, resume_text, job_text, concise=concise),
                        timeout=limit,
                    )
                except asyncio.TimeoutError as e:
                    raise ServiceTimeoutError(f"Generation attempt exceeded {limit}s") from e
                return validate_document(raw)
        raise GenerationError("Generation produced no result")

    async def _fallback(
        self,
        candidate: CandidateProfile,
        target: TargetProfile,
        resume_text: str,
        job_text: str,
        *,
        reason: str | None,
        start: float,
    ) -> GatewayResult:
        raw = await self.fallback.invoke(candidate, target, resume_text, job_text)
        document = validate_document(raw)
        return self._assemble(document, candidate, target, Provenance.FALLBACK, reason, start)

    def _assemble(
        self,
        document: TailoredDocument,
        candidate: CandidateProfile,
        target: TargetProfile,
        provenance: Provenance,
        reason: str | None,
        start: float,
    ) -> GatewayResult:
        repaired, issues = repair(document, self.config.quality)
        guarded, _ = enforce_no_injection(repaired, candidate, target)
        boosted = boost(guarded, candidate, target, self.config.booster)
        if boosted.boosted:
            logger.info("Score booster applied %d action(s): %s", len(boosted.actions), boosted.actions)
        final, final_issues = repair(boosted.document, self.config.quality)
        score_after = score_document(final, target)

        logger.info(
            "Score: before=%d after=%d (%s) provenance=%s",
            boosted.score_before.score, score_after.score, score_after.label.value, provenance.value,
        )
        return GatewayResult(
            document=final,
            provenance=provenance,
            score_before=boosted.score_before,
            score_after=score_after,
            reason=reason,
            issues=issues + final_issues,
            boost_actions=boosted.actions,
            elapsed_seconds=round(time.monotonic() - start, 3),
        )

    def health(self) -> GatewayHealth:
        """Read-only operational snapshot."""
        return GatewayHealth(
            circuit_open=self.breaker.is_open(),
            active_requests=self.slots.active,
            recent_failures=self.breaker.recent_failures(),
            opened_at=self.breaker.opened_at,
        )
