"""Tests for the animation driver and the model producer."""

from __future__ import annotations

import threading

import pytest

from chart_plotter.animation import ChartAnimator
from chart_plotter.components import Slice
from chart_plotter.errors import ChartConfigurationError
from chart_plotter.models import MutableExtraStore, PieModel
from chart_plotter.pie import PieChart
from chart_plotter.producer import ChartModelProducer

JOIN_TIMEOUT = 5.0


@pytest.mark.integration
def test_frames_run_from_zero_to_one(manual_clock) -> None:
    """Each frame advances by one frame interval; the last frame is exactly 1."""

    fractions: list[float] = []
    with ChartAnimator(duration_ms=1000, frame_interval_ms=250, clock=manual_clock) as animator:
        task = animator.start(fractions.append)
        task.join(JOIN_TIMEOUT)

    assert fractions == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert task.is_done


@pytest.mark.integration
def test_zero_duration_runs_a_single_final_frame(manual_clock) -> None:
    """Without a duration the transition jumps straight to its end."""

    fractions: list[float] = []
    with ChartAnimator(duration_ms=0, clock=manual_clock) as animator:
        animator.start(fractions.append).join(JOIN_TIMEOUT)
    assert fractions == [1.0]


@pytest.mark.integration
def test_cancel_stops_before_the_next_frame(manual_clock) -> None:
    """No frame runs after cancel() once the frame in progress has finished."""

    started = threading.Event()
    release = threading.Event()
    fractions: list[float] = []

    def on_frame(fraction: float) -> None:
        fractions.append(fraction)
        started.set()
        release.wait(JOIN_TIMEOUT)

    with ChartAnimator(duration_ms=1000, frame_interval_ms=250, clock=manual_clock) as animator:
        task = animator.start(on_frame)
        assert started.wait(JOIN_TIMEOUT)
        task.cancel()
        release.set()
        task.join(JOIN_TIMEOUT)

    assert task.is_cancelled
    assert fractions == [0.0]


@pytest.mark.integration
def test_start_cancels_and_joins_the_running_task(manual_clock) -> None:
    """A new animation only starts once the previous one has exited."""

    started = threading.Event()
    release = threading.Event()
    first_frames: list[float] = []
    second_frames: list[float] = []

    def blocking_frame(fraction: float) -> None:
        first_frames.append(fraction)
        started.set()
        release.wait(JOIN_TIMEOUT)

    with ChartAnimator(duration_ms=1000, frame_interval_ms=250, clock=manual_clock) as animator:
        first = animator.start(blocking_frame)
        assert started.wait(JOIN_TIMEOUT)
        timer = threading.Timer(0.05, release.set)
        timer.start()
        second = animator.start(second_frames.append)
        second.join(JOIN_TIMEOUT)
        timer.join()

    assert first.is_cancelled and first.is_done
    assert first_frames == [0.0]
    assert second_frames[-1] == 1.0
    assert animator.current_task is None


@pytest.mark.integration
def test_frame_errors_surface_on_join(manual_clock) -> None:
    """An exception raised by a frame is re-raised to whoever joins the task."""

    def failing_frame(fraction: float) -> None:
        raise ValueError("boom")

    with ChartAnimator(duration_ms=1000, frame_interval_ms=250, clock=manual_clock) as animator:
        task = animator.start(failing_frame)
        with pytest.raises(ValueError, match="boom"):
            task.join(JOIN_TIMEOUT)


@pytest.mark.unit
def test_animator_rejects_invalid_timing() -> None:
    """Negative durations and non-positive frame intervals are configuration errors."""

    with pytest.raises(ChartConfigurationError):
        ChartAnimator(duration_ms=-1)
    with pytest.raises(ChartConfigurationError):
        ChartAnimator(frame_interval_ms=0)


class Recorder:
    """Collects the producer callbacks in call order."""

    def __init__(self, fractions=(0.0, 1.0)):
        self.events: list[str] = []
        self.published: list[tuple] = []
        self.fractions = fractions

    def cancel_animation(self) -> None:
        self.events.append("cancel")

    def start_animation(self, transform_model) -> None:
        self.events.append("start")
        for fraction in self.fractions:
            transform_model(fraction)

    def on_model_created(self, model, ranges) -> None:
        self.published.append((model, ranges))


def _register(producer: ChartModelProducer, chart: PieChart, recorder: Recorder, key="chart") -> MutableExtraStore:
    store = MutableExtraStore()

    def prepare(model, extra_store) -> None:
        recorder.events.append("prepare")
        chart.prepare_for_transformation(model, extra_store)

    producer.register_for_updates(
        key=key,
        cancel_animation=recorder.cancel_animation,
        start_animation=recorder.start_animation,
        prepare_for_transformation=prepare,
        transform=chart.transform,
        extra_store=store,
        update_ranges=lambda model: "ranges",
        on_model_created=recorder.on_model_created,
    )
    return store


@pytest.mark.unit
def test_registering_with_a_model_updates_immediately() -> None:
    """cancel -> prepare -> start, and every frame publishes a snapshot."""

    chart = PieChart(slices=[Slice("tab:blue")])
    recorder = Recorder()
    _register(ChartModelProducer(PieModel.of(1, 3)), chart, recorder)

    assert recorder.events == ["cancel", "prepare", "start"]
    assert len(recorder.published) == 2
    first, last = (model for model, _ in recorder.published)
    assert [s.degrees for s in chart.get_drawing_model(first).slices] == [0.0, 0.0]
    assert [s.degrees for s in chart.get_drawing_model(last).slices] == pytest.approx([90.0, 270.0])
    assert recorder.published[-1][1] == "ranges"


@pytest.mark.unit
def test_published_snapshots_are_not_mutated_by_later_frames() -> None:
    """Each frame snapshots the extra store."""

    chart = PieChart(slices=[Slice("tab:blue")])
    recorder = Recorder(fractions=(0.0, 0.5, 1.0))
    _register(ChartModelProducer(PieModel.of(1, 1)), chart, recorder)

    degrees = [chart.get_drawing_model(model).slices[0].degrees for model, _ in recorder.published]
    assert degrees == pytest.approx([0.0, 90.0, 180.0])


@pytest.mark.unit
def test_set_model_reaches_every_consumer_until_unregistered() -> None:
    """Unregistered consumers no longer receive models."""

    producer = ChartModelProducer()
    first, second = Recorder(), Recorder()
    _register(producer, PieChart(slices=[Slice("tab:blue")]), first, key="a")
    _register(producer, PieChart(slices=[Slice("tab:blue")]), second, key="b")
    assert first.events == second.events == []

    producer.set_model(PieModel.of(1))
    producer.unregister_from_updates("b")
    producer.set_model(PieModel.of(2))

    assert first.events.count("start") == 2
    assert second.events.count("start") == 1
    assert producer.is_registered("a") and not producer.is_registered("b")


@pytest.mark.unit
def test_clearing_the_model_publishes_none() -> None:
    """set_model(None) publishes an empty snapshot."""

    producer = ChartModelProducer(PieModel.of(1))
    recorder = Recorder()
    store = _register(producer, PieChart(slices=[Slice("tab:blue")]), recorder)
    producer.set_model(None)

    assert recorder.published[-1][0] is None
    assert len(store) == 0
