from contextlib import contextmanager
from typing import Dict, Optional

from opentelemetry.trace import Tracer

from imgproxy_bridge.utils.log import HandlerLogger


@contextmanager
def traced_request(
    tracer: Tracer,
    operation: str,
    log: HandlerLogger,
    src: Optional[str],
    start_message: str,
    extra_attrs: Optional[Dict] = None,
):
    """Context manager to create a span, set common attributes, and log a start message."""
    with tracer.start_as_current_span(operation) as span:
        if src:
            span.set_attribute("imgproxy.src", src)
        if extra_attrs:
            for k, v in extra_attrs.items():
                span.set_attribute(k, v)
        log.debug(start_message)
        yield span
