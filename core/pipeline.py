"""Shared consumer/processor/producer scaffolding."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Protocol, TypeVar

from .cli_errors import exit_code_for

LOG = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT")
ResultT = TypeVar("ResultT")
RequestT = TypeVar("RequestT")
T = TypeVar("T")
R = TypeVar("R")


@dataclass
class ResultEnvelope(Generic[ResultT]):
    status: str
    payload: Optional[ResultT] = None
    diagnostics: Optional[dict[str, Any]] = None

    def ok(self) -> bool:
        return self.status.lower() == "success"

    def unwrap(self) -> ResultT:
        """Return payload or raise ValueError. Use after ok() check."""
        if self.payload is None:
            msg = (self.diagnostics or {}).get("message", "No payload")
            raise ValueError(msg)
        return self.payload

    def exit_code(self) -> int:
        """0 on success, else the diagnostics code (default 2)."""
        if self.ok():
            return 0
        return int((self.diagnostics or {}).get("code", 2))


class Consumer(Protocol[PayloadT]):
    def consume(self) -> PayloadT:
        ...


class Processor(Protocol[PayloadT, ResultT]):
    def process(self, payload: PayloadT) -> ResultT:
        ...


class Producer(Protocol[ResultT]):
    def produce(self, result: ResultT) -> None:
        ...


class RequestConsumer(Generic[RequestT], Consumer[RequestT]):
    """Generic consumer that wraps any request object.

    Example usage:
        request = ClassifyRequest(...)
        payload = RequestConsumer(request).consume()  # Returns the request
    """

    def __init__(self, request: RequestT) -> None:
        self._request = request

    def consume(self) -> RequestT:  # pragma: no cover - trivial
        return self._request


class BaseProducer:
    """Base class for pipeline producers with common error handling.

    Subclasses override _produce_success() to render successful results;
    failed envelopes print their diagnostics message here.
    """

    def produce(self, result: ResultEnvelope) -> None:
        """Template method: handle errors, delegate success to subclass."""
        if not result.ok():
            msg = (result.diagnostics or {}).get("message")
            if msg:
                print(f"Error: {msg}")
            return
        if result.payload is not None:
            self._produce_success(result.payload, result.diagnostics)

    def _produce_success(self, payload: Any, diagnostics: Optional[Dict[str, Any]]) -> None:
        """Override in subclass to handle successful result output."""
        raise NotImplementedError("Subclass must implement _produce_success")


class SafeProcessor(Generic[T, R]):
    """Base processor with automatic error handling wrapper.

    Subclasses override _process_safe(); any exception becomes an error
    envelope whose diagnostics carry the message and an exit code.
    """

    def process(self, payload: T) -> ResultEnvelope[R]:
        """Wrap _process_safe with error handling."""
        try:
            result = self._process_safe(payload)
            return ResultEnvelope(status="success", payload=result)
        except Exception as e:
            LOG.debug("%s failed", type(self).__name__, exc_info=True)
            return ResultEnvelope(
                status="error",
                diagnostics={"message": str(e), "code": exit_code_for(e)},
            )

    def _process_safe(self, payload: T) -> R:
        """Override to implement processing logic without error handling boilerplate."""
        raise NotImplementedError("Subclass must implement _process_safe")


def run_pipeline(request: Any, processor: Any, producer: Any) -> int:
    """Execute a pipeline and return CLI exit code.

    Args:
        request: The request object to process
        processor: Processor instance
        producer: Producer instance

    Returns:
        0 on success, or error code from diagnostics (default 2)
    """
    envelope = processor.process(RequestConsumer(request).consume())
    producer.produce(envelope)
    return envelope.exit_code()
