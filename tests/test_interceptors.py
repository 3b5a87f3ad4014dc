"""
Tests for interceptor chain execution.

Covers:
- Empty chains
- Success/failure folding and recovery
- Async hooks
- Seeding the chain with a failure
"""

import pytest

from resticle.core import (
    REQUEST_HOOKS,
    RESPONSE_HOOKS,
    RequestErrorInterceptor,
    RequestInterceptor,
    ResponseInterceptor,
    execute_interceptors,
)

# =============================================================================
# Helpers
# =============================================================================


class Boom(Exception):
    pass


class Rejecting:
    def request(self, req):
        raise Boom("rejected")


class Recovering:
    def __init__(self, value):
        self.value = value
        self.seen = []

    def request_error(self, exc):
        self.seen.append(exc)
        return self.value


class Recording:
    def __init__(self):
        self.seen = []

    def request(self, req):
        self.seen.append(req)
        return req


class Appending:
    def __init__(self, tag):
        self.tag = tag

    async def request(self, req):
        return [*req, self.tag]


# =============================================================================
# Chain Tests
# =============================================================================


class TestEmptyChain:
    @pytest.mark.asyncio
    async def test_request_phase_returns_initial(self):
        initial = object()
        assert await execute_interceptors(initial, [], REQUEST_HOOKS) is initial

    @pytest.mark.asyncio
    async def test_response_phase_returns_raw(self):
        raw = {"id": 1}
        assert await execute_interceptors(raw, [], RESPONSE_HOOKS, "req") is raw

    @pytest.mark.asyncio
    async def test_seeded_failure_is_raised(self):
        err = Boom("transport")
        with pytest.raises(Boom) as exc_info:
            await execute_interceptors(None, [], RESPONSE_HOOKS, "req", failure=err)
        assert exc_info.value is err


class TestChainOrdering:
    @pytest.mark.asyncio
    async def test_runs_in_registration_order(self):
        result = await execute_interceptors(
            [], [Appending("a"), Appending("b"), Appending("c")], REQUEST_HOOKS
        )
        assert result == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_missing_hooks_are_skipped(self):
        class Nothing:
            pass

        result = await execute_interceptors([], [Nothing(), Appending("a")], REQUEST_HOOKS)
        assert result == ["a"]

    @pytest.mark.asyncio
    async def test_sync_and_async_hooks_mix(self):
        class SyncUpper:
            def request(self, req):
                return req.upper()

        class AsyncSuffix:
            async def request(self, req):
                return req + "!"

        result = await execute_interceptors("hi", [SyncUpper(), AsyncSuffix()], REQUEST_HOOKS)
        assert result == "HI!"


class TestRecovery:
    @pytest.mark.asyncio
    async def test_recovery_law(self):
        recovering = Recovering("V")
        recording = Recording()

        result = await execute_interceptors(
            "initial", [Rejecting(), recovering, recording], REQUEST_HOOKS
        )

        assert result == "V"
        assert recording.seen == ["V"]
        assert isinstance(recovering.seen[0], Boom)

    @pytest.mark.asyncio
    async def test_interceptor_recovers_own_failure(self):
        class SelfHealing:
            def request(self, req):
                raise Boom("own")

            def request_error(self, exc):
                return "healed"

        assert await execute_interceptors("x", [SelfHealing()], REQUEST_HOOKS) == "healed"

    @pytest.mark.asyncio
    async def test_success_hooks_skipped_while_failed(self):
        recording = Recording()
        with pytest.raises(Boom):
            await execute_interceptors("x", [Rejecting(), recording], REQUEST_HOOKS)
        assert recording.seen == []

    @pytest.mark.asyncio
    async def test_failure_hook_not_called_when_succeeded(self):
        recovering = Recovering("V")
        result = await execute_interceptors("x", [recovering], REQUEST_HOOKS)
        assert result == "x"
        assert recovering.seen == []

    @pytest.mark.asyncio
    async def test_failure_hook_raise_replaces_reason(self):
        class Translating:
            def request_error(self, exc):
                raise ValueError(f"translated {exc}")

        with pytest.raises(ValueError, match="translated rejected"):
            await execute_interceptors("x", [Rejecting(), Translating()], REQUEST_HOOKS)

    @pytest.mark.asyncio
    async def test_unrecovered_failure_propagates_unchanged(self):
        err = Boom("original")

        class Raising:
            def request(self, req):
                raise err

        with pytest.raises(Boom) as exc_info:
            await execute_interceptors("x", [Raising()], REQUEST_HOOKS)
        assert exc_info.value is err


class TestResponsePhase:
    @pytest.mark.asyncio
    async def test_request_passed_as_context(self):
        seen = []

        class Capturing:
            def response(self, data, req):
                seen.append((data, req))
                return {**data, "seen": True}

        result = await execute_interceptors({"a": 1}, [Capturing()], RESPONSE_HOOKS, "REQ")
        assert result == {"a": 1, "seen": True}
        assert seen == [({"a": 1}, "REQ")]

    @pytest.mark.asyncio
    async def test_seeded_failure_recovered(self):
        class Fallback:
            async def response_error(self, exc, req):
                return {"fallback": str(exc), "req": req}

        result = await execute_interceptors(
            None, [Fallback()], RESPONSE_HOOKS, "REQ", failure=Boom("down")
        )
        assert result == {"fallback": "down", "req": "REQ"}


class TestProtocols:
    def test_runtime_checkable(self):
        assert isinstance(Recording(), RequestInterceptor)
        assert isinstance(Recovering(1), RequestErrorInterceptor)
        assert not isinstance(Recording(), ResponseInterceptor)
