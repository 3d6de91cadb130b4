"""Unit tests for the workflow graph run loop.

These tests assert transition ordering, dispatcher precedence, the iteration
ceiling, human-input pauses and failure propagation.
"""

from __future__ import annotations

import pytest

from graph_agent_orchestrator.core.context import WorkflowContext
from graph_agent_orchestrator.core.errors import GraphConfigurationError, UnknownStepError
from graph_agent_orchestrator.core.graph import WorkflowGraph
from graph_agent_orchestrator.core.interfaces import END
from graph_agent_orchestrator.core.observer import GraphObserver


def mark(name: str):
    def step(context: WorkflowContext) -> WorkflowContext:
        context.put(name, "done")
        return context

    return step


class RecordingObserver(GraphObserver[WorkflowContext]):
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_start(self, context):
        self.events.append(("start",))

    def before_step(self, step_name, context):
        self.events.append(("before", step_name))

    def after_step(self, step_name, context):
        self.events.append(("after", step_name))

    def on_transition(self, from_step, to_step, context):
        self.events.append(("transition", from_step, to_step))

    def on_human_input_required(self, step_name, context):
        self.events.append(("human", step_name))

    def on_error(self, step_name, context, error):
        self.events.append(("error", step_name, str(error)))

    def on_complete(self, context):
        self.events.append(("complete",))


def abc_graph() -> WorkflowGraph[WorkflowContext]:
    return (
        WorkflowGraph[WorkflowContext]()
        .add_step("A", mark("A"))
        .add_step("B", mark("B"))
        .add_step("C", mark("C"))
        .set_entry_point("A")
        .add_edge("A", "B")
        .add_conditional_edge("B", "C", lambda ctx: ctx.get("flag", False))
        .add_edge("B", END)
        .add_edge("C", END)
    )


@pytest.mark.parametrize(
    ("flag", "path"),
    [(True, ["A", "B", "C"]), (False, ["A", "B"])],
)
def test_conditional_scenario(flag: bool, path: list[str]) -> None:
    result = abc_graph().execute(WorkflowContext({"flag": flag}))

    assert result.execution_path == path
    assert result.error is None
    assert not result.has_error


def test_linear_workflow_updates_context() -> None:
    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("step1", mark("step1"))
        .add_step("step2", mark("step2"))
        .set_entry_point("step1")
        .add_edge("step1", "step2")
        .add_edge("step2", END)
    )

    result = graph.execute(WorkflowContext())

    assert result.get("step1") == "done"
    assert result.get("step2") == "done"


def test_step_without_transitions_ends_run() -> None:
    graph = WorkflowGraph[WorkflowContext]().add_step("only", mark("only")).set_entry_point("only")

    observer = RecordingObserver()
    graph.add_observer(observer)
    result = graph.execute(WorkflowContext())

    assert result.execution_path == ["only"]
    assert ("transition", "only", END) in observer.events


def test_first_matching_transition_wins() -> None:
    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("X", mark("X"))
        .add_step("no", mark("no"))
        .add_step("yes", mark("yes"))
        .add_step("fallback", mark("fallback"))
        .set_entry_point("X")
        .add_conditional_edge("X", "no", lambda ctx: False)
        .add_conditional_edge("X", "yes", lambda ctx: True)
        .add_edge("X", "fallback")
    )

    for _ in range(3):
        assert graph.execute(WorkflowContext()).execution_path == ["X", "yes"]


def test_no_matching_transition_ends_run() -> None:
    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("X", mark("X"))
        .add_step("Y", mark("Y"))
        .set_entry_point("X")
        .add_conditional_edge("X", "Y", lambda ctx: False)
    )

    result = graph.execute(WorkflowContext())

    assert result.execution_path == ["X"]
    assert result.error is None


def test_raising_condition_is_treated_as_false() -> None:
    def boom(ctx: WorkflowContext) -> bool:
        raise RuntimeError("bad predicate")

    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("X", mark("X"))
        .add_step("Y", mark("Y"))
        .add_step("Z", mark("Z"))
        .set_entry_point("X")
        .add_conditional_edge("X", "Y", boom)
        .add_edge("X", "Z")
    )

    assert graph.execute(WorkflowContext()).execution_path == ["X", "Z"]


def test_dispatcher_overrides_transitions() -> None:
    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("route", lambda ctx: ctx.put("type", "B"))
        .add_step("handleA", mark("handleA"))
        .add_step("handleB", mark("handleB"))
        .set_entry_point("route")
        .add_conditional_edge("route", "handleA", lambda ctx: False)
        .add_dispatcher("route", lambda ctx: "handleA" if ctx.get("type") == "A" else "handleB")
        .add_edge("handleA", END)
        .add_edge("handleB", END)
    )

    result = graph.execute(WorkflowContext())

    assert result.execution_path == ["route", "handleB"]
    assert result.get("handleB") == "done"


def test_dispatcher_can_end_run() -> None:
    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("A", mark("A"))
        .add_step("B", mark("B"))
        .set_entry_point("A")
        .add_edge("A", "B")
        .add_dispatcher("A", lambda ctx: END)
    )

    assert graph.execute(WorkflowContext()).execution_path == ["A"]


def test_dispatcher_reregistration_replaces() -> None:
    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("A", mark("A"))
        .add_step("B", mark("B"))
        .add_step("C", mark("C"))
        .set_entry_point("A")
        .add_dispatcher("A", lambda ctx: "B")
        .add_dispatcher("A", lambda ctx: "C")
    )

    assert graph.execute(WorkflowContext()).execution_path == ["A", "C"]
    assert graph.dispatcher_steps == ["A"]


def test_dispatcher_to_unknown_step_fails_on_next_lookup() -> None:
    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("A", mark("A"))
        .set_entry_point("A")
        .add_dispatcher("A", lambda ctx: "missing")
    )
    observer = RecordingObserver()
    graph.add_observer(observer)
    context = WorkflowContext()

    with pytest.raises(UnknownStepError) as excinfo:
        graph.execute(context)

    assert excinfo.value.step_name == "missing"
    assert context.get("A") == "done"
    assert context.execution_path == ["A", "missing"]
    assert context.error == "Step not found: missing"
    assert ("complete",) not in observer.events


@pytest.mark.parametrize("ceiling", [1, 2, 5])
def test_cycle_stops_at_iteration_ceiling(ceiling: int) -> None:
    executed: list[str] = []

    def step(name: str):
        return lambda ctx: executed.append(name)

    graph = (
        WorkflowGraph[WorkflowContext](max_iterations=ceiling)
        .add_step("ping", step("ping"))
        .add_step("pong", step("pong"))
        .set_entry_point("ping")
        .add_edge("ping", "pong")
        .add_edge("pong", "ping")
    )
    observer = RecordingObserver()
    graph.add_observer(observer)

    result = graph.execute(WorkflowContext())

    assert len(executed) == ceiling
    assert result.error == f"Workflow exceeded maximum iterations: {ceiling}"
    assert observer.events[-1] == ("complete",)


def test_reaching_end_on_last_allowed_iteration_is_not_an_error() -> None:
    graph = (
        WorkflowGraph[WorkflowContext](max_iterations=2)
        .add_step("A", mark("A"))
        .add_step("B", mark("B"))
        .set_entry_point("A")
        .add_edge("A", "B")
    )

    result = graph.execute(WorkflowContext())

    assert result.execution_path == ["A", "B"]
    assert result.error is None


def test_human_input_pauses_run() -> None:
    after_pause: list[str] = []
    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("process", mark("process"))
        .add_step("wait", lambda ctx: ctx.request_human_input())
        .add_step("after", lambda ctx: after_pause.append("after"))
        .set_entry_point("process")
        .add_edge("process", "wait")
        .add_edge("wait", "after")
    )
    observer = RecordingObserver()
    graph.add_observer(observer)

    result = graph.execute(WorkflowContext())

    assert result.needs_human_input
    assert result.paused_at == "wait"
    assert result.error is None
    assert result.execution_path == ["process", "wait"]
    assert after_pause == []
    assert observer.events[-1] == ("human", "wait")
    assert ("complete",) not in observer.events


def test_resume_after_human_input() -> None:
    def approval(ctx: WorkflowContext) -> None:
        if ctx.human_input is None:
            ctx.request_human_input()
        else:
            ctx.put("approved", ctx.human_input == "approve")

    graph = (
        WorkflowGraph[WorkflowContext]()
        .add_step("validate", mark("validate"))
        .add_step("approval", approval)
        .add_step("notify", mark("notify"))
        .set_entry_point("validate")
        .add_edge("validate", "approval")
        .add_edge("approval", "notify")
    )

    paused = graph.execute(WorkflowContext())
    paused.human_input = "approve"
    assert not paused.needs_human_input

    result = graph.resume(paused)

    assert result.execution_path == ["approval", "notify"]
    assert result.get("approved") is True
    assert result.paused_at is None


def test_step_failure_propagates_and_records_error() -> None:
    def fail(ctx: WorkflowContext) -> None:
        raise RuntimeError("Test error")

    graph = WorkflowGraph[WorkflowContext]().add_step("fail", fail).set_entry_point("fail")
    observer = RecordingObserver()
    graph.add_observer(observer)
    context = WorkflowContext()

    with pytest.raises(RuntimeError, match="Test error"):
        graph.execute(context)

    assert context.error == "Step fail failed: Test error"
    assert ("error", "fail", "Test error") in observer.events
    assert ("after", "fail") not in observer.events
    assert ("complete",) not in observer.events


def test_step_returning_non_context_is_a_step_failure() -> None:
    graph = WorkflowGraph[WorkflowContext]().add_step("A", lambda ctx: True).set_entry_point("A")
    observer = RecordingObserver()
    graph.add_observer(observer)
    context = WorkflowContext()

    with pytest.raises(TypeError, match="expected a context or None, got bool"):
        graph.execute(context)

    assert context.error == "Step A failed: expected a context or None, got bool"
    assert ("error", "A", "expected a context or None, got bool") in observer.events
    assert ("complete",) not in observer.events


def test_observer_event_order() -> None:
    observer = RecordingObserver()
    graph = abc_graph().add_observer(observer)

    graph.execute(WorkflowContext({"flag": False}))

    assert observer.events == [
        ("start",),
        ("before", "A"),
        ("after", "A"),
        ("transition", "A", "B"),
        ("before", "B"),
        ("after", "B"),
        ("transition", "B", END),
        ("complete",),
    ]


def test_failing_observer_is_isolated() -> None:
    class Broken(GraphObserver[WorkflowContext]):
        def before_step(self, step_name, context):
            raise RuntimeError("observer broke")

        def on_complete(self, context):
            raise RuntimeError("observer broke again")

    healthy = RecordingObserver()
    graph = abc_graph().add_observer(Broken()).add_observer(healthy)

    result = graph.execute(WorkflowContext({"flag": True}))

    assert result.execution_path == ["A", "B", "C"]
    assert result.error is None
    assert ("before", "A") in healthy.events
    assert healthy.events[-1] == ("complete",)


def test_step_object_with_execute_method() -> None:
    class Upper:
        def execute(self, context: WorkflowContext) -> WorkflowContext:
            context.put("text", context.get("text", "").upper())
            return context

    graph = WorkflowGraph[WorkflowContext]().add_step("upper", Upper()).set_entry_point("upper")

    assert graph.execute(WorkflowContext({"text": "hi"})).get("text") == "HI"


def test_start_at_must_be_registered() -> None:
    with pytest.raises(GraphConfigurationError):
        abc_graph().execute(WorkflowContext(), start_at="nope")


class TestBuildValidation:
    def test_empty_name_rejected(self) -> None:
        with pytest.raises(GraphConfigurationError):
            WorkflowGraph().add_step("", mark("x"))

    def test_reserved_name_rejected(self) -> None:
        with pytest.raises(GraphConfigurationError):
            WorkflowGraph().add_step(END, mark("x"))

    def test_duplicate_name_rejected(self) -> None:
        graph = WorkflowGraph().add_step("A", mark("A"))
        with pytest.raises(GraphConfigurationError):
            graph.add_step("A", mark("A"))

    def test_non_callable_step_rejected(self) -> None:
        with pytest.raises(GraphConfigurationError):
            WorkflowGraph().add_step("A", 42)  # type: ignore[arg-type]

    def test_entry_point_must_exist(self) -> None:
        with pytest.raises(GraphConfigurationError):
            WorkflowGraph().set_entry_point("A")

    def test_edge_endpoints_must_exist(self) -> None:
        graph = WorkflowGraph().add_step("A", mark("A"))
        with pytest.raises(GraphConfigurationError):
            graph.add_edge("A", "B")
        with pytest.raises(GraphConfigurationError):
            graph.add_conditional_edge("B", "A", lambda ctx: True)
        graph.add_edge("A", END)

    def test_dispatcher_step_must_exist(self) -> None:
        with pytest.raises(GraphConfigurationError):
            WorkflowGraph().add_dispatcher("A", lambda ctx: END)

    @pytest.mark.parametrize("value", [0, -1])
    def test_max_iterations_must_be_positive(self, value: int) -> None:
        with pytest.raises(GraphConfigurationError):
            WorkflowGraph(max_iterations=value)
        with pytest.raises(GraphConfigurationError):
            WorkflowGraph().set_max_iterations(value)

    def test_missing_entry_point_fails_run(self) -> None:
        graph = WorkflowGraph().add_step("A", mark("A"))
        with pytest.raises(GraphConfigurationError, match="Entry point not set"):
            graph.execute(WorkflowContext())

    def test_introspection(self) -> None:
        graph = abc_graph()
        assert graph.step_names == ["A", "B", "C"]
        assert graph.entry_point == "A"
        assert graph.max_iterations == 100
        assert [str(e) for e in graph.edges] == [
            "A -> B",
            "B -> C (conditional)",
            f"B -> {END}",
            f"C -> {END}",
        ]
