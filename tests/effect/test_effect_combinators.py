"""
Tests for Effect.success, Effect.fail and Effect.all.
"""

import asyncio

import pytest

from storeff import AllEffectsFailed, Effect, EffectFailure, Outcome, failure_value, settle
from storeff._vendor import Err, Ok

SUCCESS = "success"
FAILURE = "failure"


def slow(value, seconds, *, fail=False, success_label=SUCCESS, failure_label=FAILURE):
    async def run(store):
        await asyncio.sleep(seconds)
        if fail:
            raise EffectFailure(value)
        return value

    return Effect(run, success_label=success_label, failure_label=failure_label)


# ============================================================================
# success / fail
# ============================================================================


class TestSuccessAndFail:
    @pytest.mark.asyncio
    async def test_success_resolves_value(self) -> None:
        effect = Effect.success(SUCCESS, 4)

        assert effect.success_label == SUCCESS
        assert effect.failure_label is None
        assert await effect.resolve() == 4

    @pytest.mark.asyncio
    async def test_fail_rejects_with_value(self) -> None:
        effect = Effect.fail(FAILURE, 4)

        assert effect.failure_label == FAILURE
        assert effect.success_label is None
        with pytest.raises(EffectFailure) as excinfo:
            await effect.resolve()
        assert excinfo.value.value == 4

    @pytest.mark.asyncio
    async def test_fail_with_exception_raises_it_unwrapped(self) -> None:
        error = ValueError("bad input")

        with pytest.raises(ValueError) as excinfo:
            await Effect.fail(FAILURE, error).resolve()

        assert excinfo.value is error

    @pytest.mark.asyncio
    async def test_settle_captures_outcome(self) -> None:
        ok = await settle(Effect.success(SUCCESS, 1))
        err = await settle(Effect.fail(FAILURE, 2))

        assert ok == Ok(1)
        assert isinstance(err, Err)
        assert failure_value(err.error) == 2


# ============================================================================
# all (first-in-order failure)
# ============================================================================


class TestAll:
    @pytest.mark.asyncio
    async def test_collects_in_input_order(self) -> None:
        effects = Effect.all(
            [Effect.success(SUCCESS, 4), Effect.success(SUCCESS, 5), Effect.success(SUCCESS, 6)],
            success_label=SUCCESS,
        )

        assert await effects.resolve() == [4, 5, 6]

    @pytest.mark.asyncio
    async def test_order_follows_input_not_completion(self) -> None:
        effects = Effect.all([slow("a", 0.03), slow("b", 0.0), slow("c", 0.01)])

        assert await effects.resolve() == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_rejects_with_failure(self) -> None:
        effects = Effect.all(
            [Effect.success(SUCCESS, 4), Effect.fail(SUCCESS, 5), Effect.success(SUCCESS, 6)],
            failure_label=FAILURE,
        )

        with pytest.raises(EffectFailure) as excinfo:
            await effects.resolve()

        assert excinfo.value.value == 5

    @pytest.mark.asyncio
    async def test_first_in_order_failure_wins_over_first_in_time(self) -> None:
        effects = Effect.all(
            [
                slow("ok", 0.0),
                slow("late", 0.03, fail=True),
                slow("early", 0.0, fail=True),
            ]
        )

        with pytest.raises(EffectFailure) as excinfo:
            await effects.resolve()

        assert excinfo.value.value == "late"

    @pytest.mark.asyncio
    async def test_members_run_concurrently(self) -> None:
        running = 0
        peak = 0

        def tracked(value):
            async def run(store):
                nonlocal running, peak
                running += 1
                peak = max(peak, running)
                await asyncio.sleep(0.01)
                running -= 1
                return value

            return Effect(run)

        assert await Effect.all([tracked(i) for i in range(4)]).resolve() == [0, 1, 2, 3]
        assert peak == 4

    @pytest.mark.asyncio
    async def test_failure_does_not_cancel_siblings(self) -> None:
        finished = []

        async def sibling(store):
            await asyncio.sleep(0.01)
            finished.append("sibling")
            return "done"

        effects = Effect.all([Effect.fail(FAILURE, "x"), Effect(sibling)])

        with pytest.raises(EffectFailure):
            await effects.resolve()

        assert finished == ["sibling"]

    @pytest.mark.asyncio
    async def test_empty_input_resolves_empty_list(self) -> None:
        assert await Effect.all([]).resolve() == []

    @pytest.mark.asyncio
    async def test_members_receive_store(self) -> None:
        seen = []

        async def run(store):
            seen.append(store)
            return None

        store = object()
        await Effect.all([Effect(run), Effect(run)]).resolve(store)

        assert seen == [store, store]

    @pytest.mark.asyncio
    async def test_combined_effect_is_chainable(self) -> None:
        effect = Effect.all([Effect.success(None, 1), Effect.success(None, 2)]).map(sum)

        assert await effect.resolve() == 3

    def test_rejects_non_effect_members(self) -> None:
        with pytest.raises(TypeError, match=r"effects\[1\]"):
            Effect.all([Effect.success(None, 1), "nope"])

    def test_rejects_unknown_mode(self) -> None:
        with pytest.raises(ValueError, match="mode"):
            Effect.all([], mode="race")

    def test_labels(self) -> None:
        effect = Effect.all([], success_label="allDone", failure_label="allFailed")

        assert (effect.success_label, effect.failure_label) == ("allDone", "allFailed")


# ============================================================================
# all (collect mode)
# ============================================================================


class TestAllCollect:
    @pytest.mark.asyncio
    async def test_successes_keyed_by_label(self) -> None:
        effects = Effect.all(
            [Effect.success("users", ["ann"]), Effect.success("posts", [1, 2])],
            mode="collect",
        )

        assert await effects.resolve() == {"users": ["ann"], "posts": [1, 2]}

    @pytest.mark.asyncio
    async def test_unlabelled_members_keyed_by_index(self) -> None:
        effects = Effect.all(
            [Effect.success(None, "a"), Effect.success("b", "b")],
            mode="collect",
        )

        assert await effects.resolve() == {0: "a", "b": "b"}

    @pytest.mark.asyncio
    async def test_every_failure_is_collected(self) -> None:
        effects = Effect.all(
            [
                Effect.fail("usersFailed", 404),
                Effect.success("posts", []),
                Effect.fail("statsFailed", 500),
            ],
            mode="collect",
        )

        with pytest.raises(AllEffectsFailed) as excinfo:
            await effects.resolve()

        assert excinfo.value.failures == {"usersFailed": 404, "statsFailed": 500}


class TestOutcome:
    def test_content_unwraps_failure(self) -> None:
        outcome = Outcome(index=2, label=None, result=Err(EffectFailure("x")))

        assert not outcome.ok
        assert outcome.content == "x"
        assert outcome.key == 2

    def test_content_of_success(self) -> None:
        outcome = Outcome(index=0, label="loaded", result=Ok([1]))

        assert outcome.ok
        assert outcome.content == [1]
        assert outcome.key == "loaded"
