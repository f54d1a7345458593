"""Batch orchestration of translation jobs.

Runs a batch of (source element, target locale) jobs with bounded
concurrency. Every job is isolated: whatever goes wrong inside it becomes
that job's failed result and never aborts its siblings. Only
misconfiguration (an unknown backend) fails the whole call, before any job
runs.

Per job:

1. cancellation / deadline check (not started yet -> CANCELLED)
2. target locale validation (INVALID_LOCALE fails only this job)
3. source locale discovery (group membership, then content locale, then
   the registry default)
4. resolver attach; when the target is new, ``produce`` runs
   admission -> translate title and body -> create the element

Jobs resolved as skipped never reach admission, so they consume no quota.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from infrastructure.logging import bind_request_context, get_module_logger
from modules.translations.content import ContentStore
from modules.translations.core.resolver import GroupMutator
from modules.translations.domain import (
    BatchResult,
    Cancelled,
    Element,
    JobResult,
    JobStatus,
    Locale,
    RateLimited,
    TranslationJob,
    TranslationsError,
)
from modules.translations.gateway import TranslatorGateway
from modules.translations.locales import LocaleRegistry
from modules.translations.rate_limiter import FixedWindowRateLimiter

logger = get_module_logger()


class BatchOrchestrator:
    """Fans translation jobs out over a bounded worker pool.

    Args:
        mutator: Group resolver/mutator.
        gateway: Translator gateway.
        rate_limiter: Per-actor admission control.
        locales: Locale registry.
        content_store: Host content collaborator.
        max_concurrency: Jobs in flight at once.
        default_timeout: Batch timeout used when ``run_batch`` gets none.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        mutator: GroupMutator,
        gateway: TranslatorGateway,
        rate_limiter: FixedWindowRateLimiter,
        locales: LocaleRegistry,
        content_store: ContentStore,
        max_concurrency: int = 4,
        default_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.mutator = mutator
        self.gateway = gateway
        self.rate_limiter = rate_limiter
        self.locales = locales
        self.content_store = content_store
        self.max_concurrency = max_concurrency
        self.default_timeout = default_timeout
        self._clock = clock

    def run_batch(
        self,
        jobs: Sequence[TranslationJob],
        actor: str,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
        correlation_id: Optional[str] = None,
    ) -> BatchResult:
        """Run ``jobs`` for ``actor`` and return results in input order.

        Args:
            jobs: Jobs to run.
            actor: Identity charged for admission.
            cancel_event: Set it to stop dispatching new jobs.
            timeout: Seconds after which jobs not yet started are cancelled.
            correlation_id: Identifier bound to every log line of the batch.

        Raises:
            ConfigurationError: a job names an unknown backend.
        """
        for backend in {job.backend for job in jobs}:
            self.gateway.resolve_backend(backend)

        timeout = timeout if timeout is not None else self.default_timeout
        deadline = self._clock() + timeout if timeout is not None else None

        with bind_request_context(
            correlation_id=correlation_id, actor=actor
        ) as cid:
            logger.info(
                "translation_batch_started",
                jobs=len(jobs),
                max_concurrency=self.max_concurrency,
                timeout=timeout,
            )
            if not jobs:
                return BatchResult(results=[], correlation_id=cid)

            results: List[Optional[JobResult]] = [None] * len(jobs)
            workers = min(self.max_concurrency, len(jobs))
            with ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="translation-batch"
            ) as executor:
                futures = [
                    executor.submit(
                        self._run_job_in_context,
                        index,
                        job,
                        actor,
                        cancel_event,
                        deadline,
                        cid,
                    )
                    for index, job in enumerate(jobs)
                ]
                for index, future in enumerate(futures):
                    results[index] = future.result()

            batch = BatchResult(results=results, correlation_id=cid)
            logger.info(
                "translation_batch_completed",
                jobs=len(jobs),
                succeeded=batch.succeeded,
                skipped=batch.skipped,
                failed=batch.failed,
            )
            return batch

    def _run_job_in_context(
        self, index, job, actor, cancel_event, deadline, correlation_id
    ) -> JobResult:
        with bind_request_context(
            correlation_id=correlation_id, actor=actor, job_index=index
        ):
            return self._run_job(index, job, actor, cancel_event, deadline)

    def _run_job(
        self,
        index: int,
        job: TranslationJob,
        actor: str,
        cancel_event: Optional[threading.Event],
        deadline: Optional[float],
    ) -> JobResult:
        try:
            if cancel_event is not None and cancel_event.is_set():
                raise Cancelled("Batch cancelled before the job started")
            if deadline is not None and self._clock() >= deadline:
                raise Cancelled("Batch timed out before the job started")

            job.status = JobStatus.IN_FLIGHT
            target_locale = self.locales.require(job.target_locale)
            source_locale = self.source_locale_of(job.source)

            outcome = self.mutator.attach_translation(
                job.source,
                source_locale,
                target_locale,
                produce=lambda: self._produce(job, source_locale, target_locale, actor),
            )
        except TranslationsError as e:
            job.status = JobStatus.FAILED
            logger.warning(
                "translation_job_failed",
                source=str(job.source),
                target_locale=job.target_locale,
                error_code=e.code,
                error=e.message,
            )
            return JobResult(
                index=index,
                source=job.source,
                target_locale=job.target_locale,
                status=JobStatus.FAILED,
                error_code=e.code,
                message=e.message,
            )
        except Exception as e:  # pylint: disable=broad-except
            job.status = JobStatus.FAILED
            logger.exception(
                "translation_job_crashed",
                source=str(job.source),
                target_locale=job.target_locale,
                error=str(e),
            )
            return JobResult(
                index=index,
                source=job.source,
                target_locale=job.target_locale,
                status=JobStatus.FAILED,
                error_code="INTERNAL_ERROR",
                message=str(e),
            )

        job.status = outcome.status
        logger.info(
            "translation_job_completed",
            source=str(job.source),
            target_locale=target_locale,
            status=outcome.status.value,
            element=str(outcome.element),
            trid=outcome.trid,
        )
        return JobResult(
            index=index,
            source=job.source,
            target_locale=target_locale,
            status=outcome.status,
            element=outcome.element,
            trid=outcome.trid,
        )

    def source_locale_of(self, element: Element) -> Locale:
        """Locale of ``element``: group membership, then content, then default."""
        group = self.mutator.store.get_group(element)
        if group is not None:
            locale = group.locale_of(element)
            if locale:
                return locale
        content = self.content_store.get_content(element)
        return content.locale or self.locales.default_locale

    def _produce(
        self,
        job: TranslationJob,
        source_locale: Locale,
        target_locale: Locale,
        actor: str,
    ) -> Element:
        if not self.rate_limiter.try_admit(actor, 1):
            raise RateLimited(
                f"Rate limit exceeded for actor '{actor}'",
                details={"actor": actor, "quota": self.rate_limiter.quota},
            )
        content = self.content_store.get_content(job.source)
        title = self.gateway.translate(
            content.title, source_locale, target_locale, backend=job.backend
        )
        body = self.gateway.translate(
            content.body, source_locale, target_locale, backend=job.backend
        )
        return self.content_store.create_translation(
            job.source, target_locale, title, body
        )
