import asyncio

import structlog
from shared.observability import booking_saga_compensation_total

logger = structlog.get_logger(__name__)

class SagaStep:
    def __init__(self, name, action, compensation=None):
        self.name = name
        self.action = action
        self.compensation = compensation

    @property
    def kind(self) -> str:
        # "reserve_spaces:3" -> "reserve_spaces", keeps metric labels bounded
        return self.name.split(":", 1)[0]

class SagaOrchestrator:
    def __init__(self):
        self.steps = []

    def add_step(self, name: str, action, compensation=None):
        """Builder pattern to add a step and its rollback compensation."""
        self.steps.append(SagaStep(name, action, compensation))
        return self

    async def execute(self, ctx: dict):
        """Executes steps sequentially. Triggers rollback on any exception."""
        executed_steps = []
        for step in self.steps:
            try:
                await step.action(ctx)
            except asyncio.CancelledError:
                logger.warning("saga_cancelled", step=step.name)
                # Shielded so a second cancel cannot interrupt the compensations
                await asyncio.shield(self._rollback(executed_steps, ctx))
                raise
            except Exception as e:
                logger.warning("saga_step_failed", step=step.name, error=str(e))
                await self._rollback(executed_steps, ctx)
                raise
            executed_steps.append(step)
        return True

    async def _rollback(self, executed_steps: list, ctx: dict):
        """Executes compensations in reverse order. Wraps each in a try/except."""
        logger.info("saga_rollback_started", steps=len(executed_steps))
        for step in reversed(executed_steps):
            if step.compensation:
                try:
                    await step.compensation(ctx)
                    logger.info("saga_step_compensated", step=step.name)
                    booking_saga_compensation_total.labels(step_name=step.kind).inc()
                except Exception as ce:
                    # A failing compensation MUST NOT block other compensations
                    logger.critical(
                        "saga_compensation_failed",
                        step=step.name,
                        error=str(ce),
                        note="manual intervention may be required",
                    )
