"""Tests for utils/user_context.py."""

from uuid import uuid4

import pytest

from utils.user_context import (
    clear_current_user_id,
    get_current_user_id,
    peek_current_user_id,
    set_current_user_id,
    user_context,
)


class TestUserContext:

    def test_get_without_context(self):
        with pytest.raises(RuntimeError, match="No user context"):
            get_current_user_id()

    def test_peek_without_context(self):
        assert peek_current_user_id() is None

    def test_set_and_clear(self):
        user_id = uuid4()
        set_current_user_id(user_id)
        assert get_current_user_id() == user_id

        clear_current_user_id()
        assert peek_current_user_id() is None

    def test_context_manager_restores(self):
        outer, inner = uuid4(), uuid4()

        with user_context(outer):
            with user_context(inner):
                assert get_current_user_id() == inner
            assert get_current_user_id() == outer

        assert peek_current_user_id() is None

    def test_restores_after_exception(self):
        with pytest.raises(KeyError):
            with user_context(uuid4()):
                raise KeyError("x")

        assert peek_current_user_id() is None
