# policy_monitor/utils/telemetry.py
from __future__ import annotations
import contextlib
import logging
import time
from typing import Any, Iterator

from opentelemetry import trace

logger = logging.getLogger("policy_monitor.obs")

_tracer = trace.get_tracer(__name__)


@contextlib.contextmanager
def step(name: str, **attrs: Any) -> Iterator[None]:
    """
    One pipeline stage: an OpenTelemetry span (no-op unless the deployment
    installs an SDK) plus a duration log line.
    """
    start = time.perf_counter()
    with _tracer.start_as_current_span(name) as span:
        for k, v in attrs.items():
            if v is not None:
                span.set_attribute(f"app.{k}", v)
        try:
            yield
            span.set_attribute("app.success", True)
        except Exception as e:
            span.record_exception(e)
            span.set_attribute("app.success", False)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise
        finally:
            logger.info(f"⏱️ {name} took {time.perf_counter() - start:.2f}s")
