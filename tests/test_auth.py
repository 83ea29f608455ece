"""
Tests for Supabase token handling.
"""
import pytest
from fastapi import HTTPException

from conftest import make_token
from services.auth import decode_learner_id, get_current_learner, require_learner


class TestDecodeLearnerId:
    """decode_learner_id behaviour"""

    def test_valid_token(self):
        assert decode_learner_id(make_token("learner-1")) == "learner-1"

    def test_wrong_secret(self):
        assert decode_learner_id(make_token("learner-1", secret="other")) is None

    def test_wrong_audience(self):
        assert decode_learner_id(make_token("learner-1", audience="anon-api")) is None

    def test_garbage(self):
        assert decode_learner_id("not-a-jwt") is None

    def test_missing_secret_means_guest(self, monkeypatch):
        monkeypatch.setattr("services.auth.SECRET_KEY", None)
        assert decode_learner_id(make_token("learner-1")) is None


class TestDependencies:
    """get_current_learner / require_learner behaviour"""

    @pytest.mark.asyncio
    async def test_no_token_is_guest(self):
        assert await get_current_learner(None) is None

    @pytest.mark.asyncio
    async def test_token_resolves_learner(self):
        assert await get_current_learner(make_token("learner-2")) == "learner-2"

    @pytest.mark.asyncio
    async def test_require_learner_rejects_guest(self):
        with pytest.raises(HTTPException) as exc_info:
            await require_learner(None)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_require_learner_passes_id(self):
        assert await require_learner("learner-3") == "learner-3"
