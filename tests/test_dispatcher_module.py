"""Tests for :mod:`profilecallee.dispatcher`."""

from __future__ import annotations

import threading

import pytest

from profilecallee.dispatcher import CallDispatcher
from profilecallee.handlers import FunctionHandler
from profilecallee.model import CORRUPT_CALL, INVALID_CALL, Call, CallStatus, Response
from profilecallee.registry import ProfileRegistry


@pytest.fixture()
def dispatcher() -> CallDispatcher:
    return CallDispatcher(registry=ProfileRegistry())


def test_absent_call_is_corrupt(dispatcher: CallDispatcher):
    response = dispatcher.handle_call(None)

    assert response.status is CallStatus.SERVICE_SPECIFIC_FAILURE
    assert response.outputs == [("error", CORRUPT_CALL)]


@pytest.mark.parametrize("operation_id", [None, ""])
def test_call_without_operation_id_is_corrupt(dispatcher: CallDispatcher, operation_id):
    response = dispatcher.handle_call(Call(operation_id=operation_id, payload={"x": 1}))

    assert response.status is CallStatus.SERVICE_SPECIFIC_FAILURE
    assert response.output("error") == "Corrupt call"


def test_object_without_operation_id_attribute_is_corrupt(dispatcher: CallDispatcher):
    response = dispatcher.handle_call(object())

    assert response.output("error") == CORRUPT_CALL


def test_unregistered_operation_is_invalid(dispatcher: CallDispatcher):
    response = dispatcher.handle_call(Call(operation_id="unregistered-op"))

    assert response.status is CallStatus.SERVICE_SPECIFIC_FAILURE
    assert response.outputs == [("error", INVALID_CALL)]


@pytest.mark.parametrize("payload", [None, 0, "text", {"nested": [1, 2]}])
def test_matched_handler_response_passes_through(dispatcher: CallDispatcher, payload):
    sentinel = Response.success(("answer", 42))
    dispatcher.registry.add(FunctionHandler("op-42", lambda call: sentinel))

    response = dispatcher.handle_call(Call(operation_id="op-42", payload=payload))

    assert response is sentinel
    assert response.outputs == [("answer", 42)]


def test_handler_failure_response_is_not_reclassified(dispatcher: CallDispatcher):
    failure = Response.failure("out of stock", output_name="reason")
    dispatcher.registry.add(FunctionHandler("order", lambda call: failure))

    assert dispatcher.handle_call(Call(operation_id="order")) is failure


def test_handler_receives_the_original_call(dispatcher: CallDispatcher):
    seen: list[Call] = []

    def record(call: Call) -> Response:
        seen.append(call)
        return Response.success()

    dispatcher.registry.add(FunctionHandler("echo", record))
    call = Call(operation_id="echo", payload={"value": "hi"})
    dispatcher.handle_call(call)

    assert seen == [call]
    assert seen[0] is call


def test_raising_handler_becomes_failure_response(dispatcher: CallDispatcher, caplog):
    def explode(call: Call) -> Response:
        raise RuntimeError("boom")

    dispatcher.registry.add(FunctionHandler("explode", explode))

    with caplog.at_level("ERROR", logger="profilecallee.dispatcher"):
        response = dispatcher.handle_call(Call(operation_id="explode"))

    assert response.status is CallStatus.SERVICE_SPECIFIC_FAILURE
    assert response.output("error") == "boom"
    assert any(record.exc_info for record in caplog.records)


def test_custom_error_output_name():
    dispatcher = CallDispatcher(registry=ProfileRegistry(), error_output="urn:error")

    response = dispatcher.handle_call(None)

    assert response.outputs == [("urn:error", CORRUPT_CALL)]


def test_removed_handler_is_no_longer_routed(dispatcher: CallDispatcher):
    handler = FunctionHandler("temp", lambda call: Response.success())
    dispatcher.registry.add(handler)
    dispatcher.registry.remove(handler)

    assert dispatcher.handle_call(Call(operation_id="temp")).output("error") == INVALID_CALL


def test_blocking_handler_does_not_hold_registry_lock(dispatcher: CallDispatcher):
    entered = threading.Event()
    release = threading.Event()

    def slow(call: Call) -> Response:
        entered.set()
        release.wait(timeout=5)
        return Response.success()

    dispatcher.registry.add(FunctionHandler("slow", slow))
    worker = threading.Thread(target=dispatcher.handle_call, args=(Call(operation_id="slow"),))
    worker.start()
    try:
        assert entered.wait(timeout=5)
        fast = FunctionHandler("fast", lambda call: Response.success(("ok", True)))
        dispatcher.registry.add(fast)
        assert dispatcher.handle_call(Call(operation_id="fast")).output("ok") is True
    finally:
        release.set()
        worker.join(timeout=5)
