"""
Lookout pipeline state machine.

One pipeline instance backs one presentation surface (a modal, a CLI prompt,
an HTTP request). It drives a command through query generation and search:

    idle -> generating_query -> searching -> results | error

Every transition produces a new immutable PipelineState and is pushed to the
optional listener. Cancelling (closing the surface or starting a new command)
aborts the outstanding request and silences the superseded run.
"""

import asyncio
from collections.abc import Callable
from dataclasses import replace

from config.config import Config
from models.errors import LookoutValidationError
from models.lookout import LookoutCommand, PipelineStage, PipelineState
from orchestrator.error_handling import Operation, recovery_for
from orchestrator.query_generator import QueryGenerator
from tools.web.search_engine import ResultClassificationEngine
from utils.logger import get_logger

logger = get_logger(__name__)

PipelineListener = Callable[[PipelineState], None]

INVALID_COMMAND_MESSAGE = "Not a lookout command. Type @lookout followed by your question."


class LookoutPipeline:
    """Owns the PipelineState of one lookout session."""

    def __init__(
        self,
        query_generator: QueryGenerator,
        search_engine: ResultClassificationEngine,
        listener: PipelineListener | None = None,
        query_timeout_ms: int | None = None,
        prioritize_videos: bool = True,
    ):
        self.query_generator = query_generator
        self.search_engine = search_engine
        self.listener = listener
        self.query_timeout_ms = query_timeout_ms
        self.prioritize_videos = prioritize_videos

        self._state = PipelineState()
        self._generation = 0  # bumped on every run and cancel
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> PipelineState:
        return self._state

    async def run(self, command: LookoutCommand, refresh: bool = False) -> PipelineState:
        """
        Drive ``command`` to a terminal stage and return the final state.

        An invalid command ends in ``error`` with no results. Search failures
        end in ``error`` with the fallback links. If the run is cancelled or
        superseded while awaiting, the CancelledError propagates (when this
        task was cancelled) and no further state is published.
        """
        self._generation += 1
        generation = self._generation
        retry_count = self._state.retry_count if refresh else 0
        self._state = PipelineState(command=command, retry_count=retry_count)

        if not command.is_command or not command.question.strip():
            recovery = recovery_for(Operation.PIPELINE, LookoutValidationError(INVALID_COMMAND_MESSAGE))
            self._publish(
                generation,
                stage=PipelineStage.ERROR,
                error=recovery.user_message,
                suggested_actions=recovery.suggested_actions,
            )
            return self._state

        self._publish(generation, stage=PipelineStage.GENERATING_QUERY)
        generated = await self.query_generator.generate(
            command.question, command.highlighted_context, timeout_ms=self.query_timeout_ms
        )
        if not self._publish(generation, stage=PipelineStage.SEARCHING, generated_query=generated):
            return self._state

        outcome = await self.search_engine.search(
            generated.search_query, self.prioritize_videos, refresh=refresh
        )
        if outcome.success:
            self._publish(generation, stage=PipelineStage.RESULTS, outcome=outcome)
        else:
            recovery = recovery_for(Operation.SEARCH, outcome.error or "")
            self._publish(
                generation,
                stage=PipelineStage.ERROR,
                outcome=outcome,
                error=outcome.error,
                suggested_actions=recovery.suggested_actions,
            )
        return self._state

    def start(self, command: LookoutCommand, refresh: bool = False) -> asyncio.Task:
        """
        Schedule ``run`` on the running loop, superseding any active run.

        Must be called from within the event loop.
        """
        if self._task is not None and not self._task.done():
            logger.info("Superseding active lookout run")
            self.cancel()

        self._task = asyncio.ensure_future(self.run(command, refresh=refresh))
        return self._task

    def cancel(self):
        """
        Abort the outstanding run and reset to idle.

        Idempotent: cancelling an idle or finished pipeline only resets it.
        """
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info(
                "Lookout run cancelled",
                extra={"extra_fields": {"stage": self._state.stage.value}},
            )
        self._state = PipelineState()

    async def retry(self) -> PipelineState:
        """
        Re-run the last command, bypassing its cached search outcome.

        Raises:
            LookoutValidationError: If there is no previous command
        """
        command = self._state.command
        if command is None:
            raise LookoutValidationError("Nothing to retry")

        self._state = replace(self._state, retry_count=self._state.retry_count + 1)
        logger.info(
            "Retrying lookout run",
            extra={"extra_fields": {"retry_count": self._state.retry_count}},
        )
        return await self.run(command, refresh=True)

    def open_result(self, result_id: str) -> str:
        """
        Resolve a displayed result id to the url to open.

        Raises:
            LookoutValidationError: If no displayed result has that id
        """
        for result in self._state.results:
            if result.id == result_id:
                logger.info(
                    "Result opened",
                    extra={"extra_fields": {"result_id": result_id, "source": result.source}},
                )
                return result.url
        raise LookoutValidationError(f"Unknown result id: {result_id}")

    def _publish(self, generation: int, **changes) -> bool:
        """Apply ``changes`` unless the run was superseded; returns False if it was."""
        if generation != self._generation:
            return False

        self._state = replace(self._state, **changes)
        logger.debug(
            "Pipeline stage changed",
            extra={"extra_fields": {"stage": self._state.stage.value, "generation": generation}},
        )
        if self.listener is not None:
            try:
                self.listener(self._state)
            except Exception as e:
                logger.warning(
                    "Pipeline listener failed",
                    extra={"extra_fields": {"error": str(e), "error_type": type(e).__name__}},
                )
        return True


def create_pipeline_from_env(
    listener: PipelineListener | None = None, config: Config | None = None
) -> LookoutPipeline:
    """
    Build a pipeline wired to the configured AI provider and the shared cache.

    Raises:
        ValueError: If the AI provider settings are missing
    """
    from api.factory import create_ai_client
    from tools.web.factory import create_search_engine_from_env

    config = config or Config()
    generator = QueryGenerator(create_ai_client(config), default_timeout_ms=config.QUERY_TIMEOUT_MS)
    return LookoutPipeline(
        query_generator=generator,
        search_engine=create_search_engine_from_env(config),
        listener=listener,
    )
