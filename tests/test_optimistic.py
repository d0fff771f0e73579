"""Tests for optimistic attribute updates and rollback."""

import asyncio
from functools import partial
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from entity_actions.changes import ChangeState
from entity_actions.exceptions import InvalidAttributesError, MissingUrlError
from entity_actions.invoker import OptimisticInvoker, _settle, apply_optimistic


async def settle_callbacks() -> None:
    """Give scheduled done-callbacks a chance to run."""
    await asyncio.sleep(0)


@pytest_asyncio.fixture
async def pending() -> asyncio.Future:
    return asyncio.get_running_loop().create_future()


class TestApplyOptimistic:
    """Tests for the writes made by apply_optimistic()."""

    @pytest.mark.asyncio
    async def test_writes_changed_values(self, post, pending):
        changes = apply_optimistic(post, {"liked": True}, pending, "like")

        assert post.get("liked") is True
        assert changes.state is ChangeState.MUTATED
        assert [(c.key, c.old_value, c.new_value) for c in changes] == [("liked", False, True)]

    @pytest.mark.asyncio
    async def test_unchanged_values_are_not_written(self, post, pending):
        changes = apply_optimistic(post, {"liked": False, "title": "Hello"}, pending, "like")

        assert post.writes == []
        assert len(changes) == 0
        assert changes.state is ChangeState.CLEAN

    @pytest.mark.asyncio
    async def test_clean_entity_stays_clean(self, post, pending):
        assert post.is_dirty is False

        apply_optimistic(post, {"liked": True, "likes_count": 1}, pending, "like")

        assert post.is_dirty is False

    @pytest.mark.asyncio
    async def test_dirty_entity_stays_dirty(self, post, pending):
        post.set("title", "Edited")
        assert post.is_dirty is True

        apply_optimistic(post, {"liked": True}, pending, "like")

        assert post.is_dirty is True

    @pytest.mark.asyncio
    async def test_callable_receives_action_name(self, post, pending):
        new_attributes = MagicMock(return_value={"liked": True})

        apply_optimistic(post, new_attributes, pending, "like")

        new_attributes.assert_called_once_with("like")
        assert post.get("liked") is True

    @pytest.mark.asyncio
    async def test_none_is_a_noop(self, post, pending):
        assert apply_optimistic(post, None, pending, "like") is None
        assert apply_optimistic(post, lambda name: None, pending, "like") is None
        assert post.writes == []

    @pytest.mark.parametrize("bad_value", ["liked", 1, ["liked", True], ("liked",)])
    @pytest.mark.asyncio
    async def test_non_mapping_raises_before_mutation(self, post, pending, bad_value):
        with pytest.raises(InvalidAttributesError) as exc_info:
            apply_optimistic(post, bad_value, pending, "like")

        assert exc_info.value.action_name == "like"
        assert post.writes == []

    @pytest.mark.asyncio
    async def test_callable_returning_non_mapping_raises(self, post, pending):
        with pytest.raises(InvalidAttributesError):
            apply_optimistic(post, lambda name: "liked", pending, "like")

    def test_invalid_attributes_error_is_type_error(self):
        assert issubclass(InvalidAttributesError, TypeError)


class TestRollback:
    """Tests for what happens when the pending request settles."""

    @pytest.mark.asyncio
    async def test_rejection_restores_values_and_dirty_flag(self, post, pending):
        """liked goes back to False and the record is as clean as before."""
        changes = apply_optimistic(post, {"liked": True}, pending, "like")

        pending.set_exception(RuntimeError("500"))
        await settle_callbacks()

        assert post.get("liked") is False
        assert post.is_dirty is False
        assert changes.state is ChangeState.REVERTED

    @pytest.mark.asyncio
    async def test_rejection_keeps_preexisting_dirtiness(self, post, pending):
        post.set("title", "Edited")
        apply_optimistic(post, {"liked": True}, pending, "like")

        pending.set_exception(RuntimeError("500"))
        await settle_callbacks()

        assert post.get("liked") is False
        assert post.get("title") == "Edited"
        assert post.is_dirty is True

    @pytest.mark.asyncio
    async def test_rejection_reverts_in_recording_order(self, post, pending):
        apply_optimistic(post, {"liked": True, "title": "New", "reason": "spam"}, pending, "like")
        post.writes.clear()

        pending.set_exception(RuntimeError("500"))
        await settle_callbacks()

        assert post.writes == [("liked", False), ("title", "Hello")]

    @pytest.mark.asyncio
    async def test_rejection_leaves_unchanged_keys_untouched(self, post, pending):
        apply_optimistic(post, {"liked": True, "reason": "spam"}, pending, "like")
        post.writes.clear()

        pending.set_exception(RuntimeError("500"))
        await settle_callbacks()

        assert [key for key, _ in post.writes] == ["liked"]
        assert post.get("reason") == "spam"

    @pytest.mark.asyncio
    async def test_new_key_reverts_to_missing_value(self, post, pending):
        apply_optimistic(post, {"likes_count": 1}, pending, "like")

        pending.set_exception(RuntimeError("500"))
        await settle_callbacks()

        assert post.get("likes_count") is None

    @pytest.mark.asyncio
    async def test_success_never_reverts(self, post, pending):
        changes = apply_optimistic(post, {"liked": True}, pending, "like")
        post.writes.clear()

        pending.set_result({"ok": True})
        await settle_callbacks()

        assert post.get("liked") is True
        assert post.writes == []
        assert changes.state is ChangeState.COMMITTED

    @pytest.mark.asyncio
    async def test_cancellation_reverts(self, post, pending):
        changes = apply_optimistic(post, {"liked": True}, pending, "like")

        pending.cancel()
        await settle_callbacks()

        assert post.get("liked") is False
        assert changes.state is ChangeState.REVERTED

    @pytest.mark.asyncio
    async def test_revert_happens_only_once(self, post, pending):
        changes = apply_optimistic(post, {"liked": True}, pending, "like")
        pending.set_exception(RuntimeError("500"))
        await settle_callbacks()
        post.set("liked", True)
        post.writes.clear()

        # A second delivery of the same outcome is ignored
        _settle(post, changes, pending)

        assert post.writes == []
        assert post.get("liked") is True

    @pytest.mark.asyncio
    async def test_one_callback_per_invocation(self, post):
        pending = MagicMock()

        apply_optimistic(post, {"liked": True}, pending, "like")

        pending.add_done_callback.assert_called_once()
        callback = pending.add_done_callback.call_args.args[0]
        assert isinstance(callback, partial)


class TestPerformOptimistic:
    """Tests for OptimisticInvoker.perform_optimistic()."""

    @pytest.fixture
    def invoker(self, transport, naming) -> OptimisticInvoker:
        return OptimisticInvoker({"like": "likes/create"}, transport, naming=naming, url_prefix="/api")

    @pytest.mark.asyncio
    async def test_failed_request_rolls_back(self, invoker, transport, post):
        pending = invoker.perform_optimistic(post, "like", new_attributes={"liked": True})
        assert post.get("liked") is True

        transport.last.future.set_exception(ConnectionError("offline"))
        with pytest.raises(ConnectionError):
            await pending
        await settle_callbacks()

        assert post.get("liked") is False
        assert post.is_dirty is False

    @pytest.mark.asyncio
    async def test_successful_request_commits(self, invoker, transport, post):
        pending = invoker.perform_optimistic(post, "like", {"source": "feed"}, {"liked": True})

        transport.last.future.set_result({"id": 1})

        assert await pending == {"id": 1}
        assert post.get("liked") is True
        assert transport.last.data == {"source": "feed"}

    @pytest.mark.asyncio
    async def test_missing_url_leaves_entity_untouched(self, invoker, transport, post):
        with pytest.raises(MissingUrlError):
            invoker.perform_optimistic(post, "unknown", new_attributes={"liked": True})

        assert post.writes == []
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_invalid_attributes_send_no_request(self, invoker, transport, post):
        with pytest.raises(InvalidAttributesError):
            invoker.perform_optimistic(post, "like", new_attributes=["liked"])

        assert transport.requests == []
        assert post.writes == []

    @pytest.mark.asyncio
    async def test_without_attributes_behaves_like_perform(self, invoker, transport, post):
        pending = invoker.perform_optimistic(post, "like")

        assert pending is transport.last.future
        assert post.writes == []

    @pytest.mark.asyncio
    async def test_attributes_callable_not_called_for_missing_action(self, invoker, transport, post):
        new_attributes = MagicMock(return_value={"liked": True})

        with pytest.raises(MissingUrlError):
            invoker.perform_optimistic(post, "unknown", new_attributes=new_attributes)

        new_attributes.assert_not_called()
        assert transport.requests == []
        assert post.writes == []

    @pytest.mark.asyncio
    async def test_attributes_callable_runs_after_request_is_sent(self, invoker, transport, post):
        sent_before_call = []
        new_attributes = MagicMock(
            side_effect=lambda name: sent_before_call.append(len(transport.requests)) or {"liked": True}
        )

        invoker.perform_optimistic(post, "like", new_attributes=new_attributes)

        new_attributes.assert_called_once_with("like")
        assert sent_before_call == [1]
        assert post.get("liked") is True

    @pytest.mark.asyncio
    async def test_callable_returning_non_mapping_cancels_request(self, invoker, transport, post):
        with pytest.raises(InvalidAttributesError):
            invoker.perform_optimistic(post, "like", new_attributes=lambda name: ["liked"])

        assert transport.last.future.cancelled()
        assert post.writes == []
