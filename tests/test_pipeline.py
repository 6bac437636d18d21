"""Step pipeline resume semantics."""

import pytest

from winstrap.pipeline import run_pipeline
from winstrap.state_store import ensure_defaults, load_state, mark_step_completed, save_state


class RecordingStep:
    def __init__(self, step_id, *, always_run=False):
        self.step_id = step_id
        self.always_run = always_run
        self.runs = 0

    def run(self, state):
        self.runs += 1
        return state


def test_completed_steps_are_skipped_unless_always_run():
    a = RecordingStep("10_a")
    b = RecordingStep("20_b", always_run=True)
    state = ensure_defaults({})
    mark_step_completed(state, "10_a")
    mark_step_completed(state, "20_b")

    result = run_pipeline(state=state, steps=[a, b])

    assert (a.runs, b.runs) == (0, 1)
    assert result.skipped_steps == ["10_a"]
    assert result.ran_steps == ["20_b"]
    assert result.state["execution"]["current_step"] is None


def test_force_reruns_everything():
    a = RecordingStep("10_a")
    state = ensure_defaults({})
    mark_step_completed(state, "10_a")

    result = run_pipeline(state=state, steps=[a], force=True)

    assert result.ran_steps == ["10_a"]


def test_start_at_and_stop_after():
    steps = [RecordingStep(s) for s in ("10_a", "20_b", "30_c", "40_d")]

    result = run_pipeline(state=ensure_defaults({}), steps=steps, start_at="20_b", stop_after="30_c")

    assert result.ran_steps == ["20_b", "30_c"]
    assert [s.runs for s in steps] == [0, 1, 1, 0]


def test_unknown_step_name_is_rejected():
    with pytest.raises(ValueError):
        run_pipeline(state=ensure_defaults({}), steps=[RecordingStep("10_a")], start_at="99_nope")


@pytest.mark.parametrize("name", ["state.json", "state.yaml"])
def test_state_round_trips(tmp_path, name):
    path = tmp_path / "nested" / name
    state = ensure_defaults({})
    mark_step_completed(state, "10_a")

    save_state(str(path), state)

    assert load_state(str(path)) == state


def test_missing_state_is_empty(tmp_path):
    assert load_state(str(tmp_path / "none.json")) == {}
