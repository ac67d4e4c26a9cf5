"""Concurrent fan-out of evaluator roles over a shared prompt."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from llm.base_client import BaseLLMClient, Message
from schemas.recommendation import EvaluatorRole, RawResponse

logger = logging.getLogger(__name__)


class OrchestrationError(Exception):
    """Raised when the evaluator fan-out cannot run at all."""


class EvaluatorPool:
    """
    Runs every evaluator role concurrently against one prompt.

    Each role gets its own task; the blocking LLM call runs in a worker
    thread. The pool waits for every task to settle rather than failing
    fast, so one broken or slow evaluator only costs its own answer.
    Answers are collected in arrival order.
    """

    def __init__(
        self,
        llm_client: Optional[BaseLLMClient],
        timeout_seconds: float = 30.0
    ):
        """
        Initialize evaluator pool.

        Args:
            llm_client: LLM client shared by all roles
            timeout_seconds: Per-role time limit
        """
        self.llm_client = llm_client
        self.timeout_seconds = timeout_seconds

    async def dispatch(
        self,
        roles: Sequence[EvaluatorRole],
        prompt: str,
        cancel: Optional[asyncio.Event] = None
    ) -> list[RawResponse]:
        """
        Ask every role for an answer.

        Args:
            roles: Evaluator roles to run
            prompt: Shared request text
            cancel: Optional signal; once set, in-flight roles are abandoned

        Returns:
            Answers in arrival order

        Raises:
            OrchestrationError: If the fan-out cannot be started or the join fails
        """
        if self.llm_client is None or not self.llm_client.is_configured():
            raise OrchestrationError("No LLM client configured for evaluators")
        if not roles:
            raise OrchestrationError("No evaluator roles configured")

        responses: list[RawResponse] = []
        logger.info(f"Dispatching {len(roles)} evaluators: {', '.join(r.name for r in roles)}")

        # Private executor; abandoned calls must not hold up event loop shutdown.
        executor = ThreadPoolExecutor(max_workers=len(roles), thread_name_prefix="evaluator")
        try:
            tasks = [
                asyncio.create_task(
                    self._run_role(role, prompt, responses, executor), name=role.name
                )
                for role in roles
            ]
            barrier = asyncio.gather(*tasks)

            if cancel is None:
                await barrier
            else:
                cancel_waiter = asyncio.create_task(cancel.wait())
                try:
                    await asyncio.wait({barrier, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
                finally:
                    cancel_waiter.cancel()

                if not barrier.done():
                    logger.info(
                        f"Evaluator dispatch cancelled with {len(responses)} of {len(roles)} answers in"
                    )
                    barrier.cancel()
                    try:
                        await barrier
                    except asyncio.CancelledError:
                        pass
                else:
                    barrier.result()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise OrchestrationError(f"Evaluator fan-out failed: {e}") from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return list(responses)

    async def _run_role(
        self,
        role: EvaluatorRole,
        prompt: str,
        responses: list[RawResponse],
        executor: ThreadPoolExecutor
    ) -> None:
        """Run one role and append its answer; failures are logged and dropped."""
        loop = asyncio.get_running_loop()
        try:
            content = await asyncio.wait_for(
                loop.run_in_executor(executor, self._invoke, role, prompt),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Evaluator {role.name} timed out after {self.timeout_seconds}s")
            return
        except Exception as e:
            logger.warning(f"Evaluator {role.name} failed: {e}")
            return

        if not content or not content.strip():
            logger.warning(f"Evaluator {role.name} returned an empty answer")
            return

        logger.debug(f"Evaluator {role.name} answered: {content!r}")
        responses.append(RawResponse(role_name=role.name, content=content))

    def _invoke(self, role: EvaluatorRole, prompt: str) -> str:
        """Blocking LLM call for one role."""
        kwargs = {}
        if role.temperature is not None:
            kwargs["temperature"] = role.temperature
        if role.max_tokens is not None:
            kwargs["max_tokens"] = role.max_tokens

        messages = [
            Message(role="system", content=role.instructions),
            Message(role="user", content=prompt),
        ]
        return self.llm_client.chat(messages=messages, **kwargs).content
