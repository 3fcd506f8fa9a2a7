"""Session state machine for one user's generate actions.

Idle -> Validating -> Loading -> Succeeded | Failed. Terminal states accept a
new generate action. Only one request is ever in flight; responses carrying
an outdated request id are dropped.
"""
from __future__ import annotations
import itertools
import logging
import time
from dataclasses import replace
from typing import Callable, Protocol

from techdocs_generator.common.errors import EMPTY_INPUT_MESSAGE, GENERIC_FAILURE_MESSAGE, GenerationError
from techdocs_generator.common.schema import (
    CustomizationParams,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    PerformanceMetrics,
    SessionState,
    SessionStatus,
    Template,
    TemplateId,
)
from techdocs_generator.common.templates import get_template, require_template

LOGGER = logging.getLogger("techdocs.session")


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> GenerationSuccess: ...


class SessionController:
    """
    Owns all mutable session state; front ends only read `state`.

    Args:
        client: Anything with an async ``generate(prompt)``.
        template_id: Initially selected template; must be registered.
        params: Initial customization parameters.
        clock: Monotonic seconds source used for generation timing.
    """

    def __init__(
        self,
        client: TextGenerator,
        template_id: TemplateId | str = TemplateId.API_ENDPOINT,
        params: CustomizationParams | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._client = client
        self._template: Template = require_template(template_id)
        self._params = params or CustomizationParams()
        self._clock = clock
        self._input = ""
        self._status = SessionStatus.IDLE
        self._result: GenerationResult | None = None
        self._metrics = PerformanceMetrics()
        self._ids = itertools.count(1)
        self._in_flight: GenerationRequest | None = None
        self._started_at: float | None = None

    @property
    def state(self) -> SessionState:
        return SessionState(
            status=self._status,
            template_id=self._template.id,
            params=self._params,
            user_input=self._input,
            result=self._result,
            metrics=self._metrics,
        )

    @property
    def template(self) -> Template:
        return self._template

    @property
    def is_loading(self) -> bool:
        return self._status is SessionStatus.LOADING

    def select_template(self, template_id: TemplateId | str) -> None:
        """Switch template and clear the input. Params and output are kept."""
        self._template = get_template(template_id)
        self._input = ""

    def set_input(self, text: str) -> None:
        self._input = text

    def update_params(self, **changes: object) -> CustomizationParams:
        """Replace the params snapshot; raises ValueError on invalid values."""
        changes = {k: v for k, v in changes.items() if v is not None}
        self._params = replace(self._params, **changes)
        return self._params

    def start_generate(self) -> GenerationRequest | None:
        """
        Validate input and move to Loading.

        Returns:
            The request to dispatch, or None when nothing should be sent:
            a request is already in flight, or the input is empty.
        """
        if self.is_loading:
            LOGGER.info("Generate ignored: request %s still in flight", self._in_flight.request_id)
            return None

        self._status = SessionStatus.VALIDATING
        if not self._input.strip():
            self._status = SessionStatus.FAILED
            self._result = GenerationFailure(EMPTY_INPUT_MESSAGE)
            self._metrics = PerformanceMetrics()
            return None

        self._result = None
        self._metrics = PerformanceMetrics()
        self._in_flight = GenerationRequest(
            request_id=next(self._ids),
            template_id=self._template.id,
            params=self._params,
            user_input=self._input,
        )
        self._started_at = self._clock()
        self._status = SessionStatus.LOADING
        return self._in_flight

    def _accept(self, request_id: int) -> bool:
        if self._in_flight is None or self._in_flight.request_id != request_id:
            LOGGER.warning("Discarding stale response for request %s", request_id)
            return False
        return True

    def receive_success(self, request_id: int, success: GenerationSuccess) -> bool:
        if not self._accept(request_id):
            return False
        elapsed = self._clock() - (self._started_at or 0.0)
        self._result = success
        self._metrics = PerformanceMetrics(generation_time_seconds=elapsed, total_tokens=success.total_tokens)
        self._status = SessionStatus.SUCCEEDED
        self._in_flight = None
        LOGGER.info("Request %s succeeded: %s", request_id, self._metrics.describe())
        return True

    def receive_failure(self, request_id: int, message: str) -> bool:
        if not self._accept(request_id):
            return False
        self._result = GenerationFailure(message)
        self._status = SessionStatus.FAILED
        self._in_flight = None
        LOGGER.info("Request %s failed: %s", request_id, message)
        return True

    async def generate(self) -> SessionState:
        """Run one generate action end to end and return the resulting state."""
        request = self.start_generate()
        if request is None:
            return self.state

        prompt = get_template(request.template_id).build_prompt(request.user_input, request.params)
        LOGGER.info(
            "Dispatching request %s template=%s prompt_len=%s",
            request.request_id,
            request.template_id.value,
            len(prompt),
        )
        try:
            success = await self._client.generate(prompt)
        except GenerationError as e:
            self.receive_failure(request.request_id, e.user_message)
        except Exception:
            LOGGER.exception("Unexpected error from generation client")
            self.receive_failure(request.request_id, GENERIC_FAILURE_MESSAGE)
        else:
            self.receive_success(request.request_id, success)
        finally:
            # Cancelled while awaiting; do not leave the session stuck in Loading.
            if self._in_flight is request:
                self.receive_failure(request.request_id, GENERIC_FAILURE_MESSAGE)
        return self.state
