import asyncio
import contextvars
from concurrent.futures import ThreadPoolExecutor

from opentelemetry.sdk.trace import TracerProvider

from portfolio_proxy.utils import run_in_executor

request_id = contextvars.ContextVar("request_id", default=None)


def test_worker_sees_caller_context():
    async def call():
        request_id.set("req-42")
        with ThreadPoolExecutor(max_workers=1) as executor:
            return await run_in_executor(executor, request_id.get)

    assert asyncio.run(call()) == "req-42"


def test_worker_span_nests_under_caller_span():
    tracer = TracerProvider().get_tracer(__name__)

    def child_parent_id():
        with tracer.start_as_current_span("child") as child:
            return child.parent.span_id

    async def call():
        with tracer.start_as_current_span("parent") as parent:
            with ThreadPoolExecutor(max_workers=1) as executor:
                parent_id = await run_in_executor(executor, child_parent_id)
            return parent_id, parent.get_span_context().span_id

    parent_id, expected = asyncio.run(call())

    assert parent_id == expected


def test_arguments_are_forwarded():
    async def call():
        return await run_in_executor(None, pow, 2, 10)

    assert asyncio.run(call()) == 1024
