"""
Tests for request/response transforms.
"""

import pytest

from resticle.core import REQUEST, RESPONSE, RequestTransform, ResponseTransform, apply_transforms


class Wrap:
    def __init__(self, tag):
        self.tag = tag

    def response(self, data):
        return {self.tag: data}


class AsyncRequestTag:
    async def request(self, req):
        return f"{req}+tag"


class TestApplyTransforms:
    @pytest.mark.asyncio
    async def test_no_transforms(self):
        payload = object()
        assert await apply_transforms(payload, [], RESPONSE) is payload

    @pytest.mark.asyncio
    async def test_applied_in_order(self):
        result = await apply_transforms(1, [Wrap("inner"), Wrap("outer")], RESPONSE)
        assert result == {"outer": {"inner": 1}}

    @pytest.mark.asyncio
    async def test_only_matching_hook_runs(self):
        transforms = [AsyncRequestTag(), Wrap("w")]
        assert await apply_transforms("req", transforms, REQUEST) == "req+tag"
        assert await apply_transforms("data", transforms, RESPONSE) == {"w": "data"}

    @pytest.mark.asyncio
    async def test_exception_propagates(self):
        class Broken:
            def response(self, data):
                raise RuntimeError("bad transform")

        with pytest.raises(RuntimeError, match="bad transform"):
            await apply_transforms({}, [Broken()], RESPONSE)

    def test_protocols(self):
        assert isinstance(AsyncRequestTag(), RequestTransform)
        assert isinstance(Wrap("x"), ResponseTransform)
        assert not isinstance(Wrap("x"), RequestTransform)
