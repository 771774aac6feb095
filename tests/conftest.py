"""Shared fixtures: a minimal template set and a stand-in for ``dot``."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from rosgen.graph.task_graph import TaskGraph
from rosgen.models.application import Application, Callback, Executor
from rosgen.models.metadata import GenerationMetadata, GraphData

# Line-oriented templates so tests can assert on exactly what was rendered.
MINIMAL_TEMPLATES: dict[str, str] = {
    "executor_0.tmpl": (
        "executor {{ index }} name={{ executor.name }} msg={{ msg_type }} "
        "duration={{ duration_us }}\n"
        "{% for include in includes %}include {{ include }}\n{% endfor %}"
    ),
    "executor_1.tmpl": "callback-logging {{ index }} name={{ executor.name }}\n",
    "executor_2.tmpl": "chain-logging {{ index }} name={{ executor.name }}\n",
    "CMakeLists.tmpl": (
        "project({{ name }})\n"
        "{% for r in executors %}add_executable({{ r.target_name }})\n{% endfor %}"
        "{% for s in sources %}source {{ s }}\n{% endfor %}"
        "{% for l in libraries %}library {{ l }}\n{% endfor %}"
    ),
    "package.tmpl": (
        "<name>{{ name }}</name>\n"
        "{% for p in packages %}<depend>{{ p }}</depend>\n{% endfor %}"
    ),
    "launch.tmpl": "{% for r in executors %}{{ name }}:{{ r.target_name }}\n{% endfor %}",
    "graph.dt": (
        "{% for n in nodes %}node {{ n.id }}|{{ n.shape }}|{{ n.fill }}|{{ n.label }}\n"
        "{% endfor %}"
        "{% for l in links %}link {{ l.source }}|{{ l.target }}|{{ l.color }}|{{ l.label }}\n"
        "{% endfor %}"
    ),
    "application.dt": (
        "app {{ application.name }}\n"
        "{% for e in application.executors %}executor {{ e.name }}\n{% endfor %}"
        "{% for l in links %}link {{ l.source }}|{{ l.target }}\n{% endfor %}"
    ),
}

# Accepts ``-T<fmt> -o <path>`` like dot and copies stdin to <path>.
FAKE_DOT_SOURCE = """\
import sys

args = sys.argv[1:]
output = args[args.index("-o") + 1]
data = sys.stdin.read()
with open(output, "w", encoding="utf-8") as fh:
    fh.write(data)
"""


def write_templates(directory: Path) -> Path:
    """Write :data:`MINIMAL_TEMPLATES` into *directory*."""
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in MINIMAL_TEMPLATES.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A generation root containing ``templates/`` with the minimal set."""
    root = tmp_path / "work"
    write_templates(root / "templates")
    return root


@pytest.fixture
def fake_dot(tmp_path: Path) -> str:
    """Path to an executable that behaves like ``dot -T<fmt> -o <out>``."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "fake-dot"
    script.write_text(f"#!{sys.executable}\n{FAKE_DOT_SOURCE}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


@pytest.fixture
def demo_application() -> Application:
    return Application(
        name="demo",
        executors=[
            Executor(
                name="sensing",
                callbacks=[Callback(id=0, node=0, priority=2, wcet_us=150, period_us=10_000,
                                    publications=["/scan"])],
            ),
            Executor(
                name="planning",
                callbacks=[Callback(id=1, node=1, priority=1, wcet_us=300,
                                    subscriptions=["/scan"])],
            ),
        ],
    )


@pytest.fixture
def demo_graph_data() -> GraphData:
    """One chain of two connected nodes, 0 -> 1."""
    graph = TaskGraph(2)
    graph.add_edge(0, 1, tag=0, num=0, color="red")
    return GraphData(
        chains=[2],
        node_wcet={0: 150, 1: 300},
        node_priority={0: 2, 1: 1},
        graph=graph,
    )


@pytest.fixture
def demo_metadata() -> GenerationMetadata:
    return GenerationMetadata(
        packages=["rclcpp", "std_msgs"],
        includes=['"std_msgs/msg/int64.hpp"'],
        msg_type="std_msgs::msg::Int64",
        duration_us=5_000_000,
    )
