"""Unit tests for the driver."""

import io
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from tempfile import TemporaryDirectory

from pygant.binding import Binding
from pygant.driver import DEFAULT_TARGET, Gant
from pygant.errors import (
    SCRIPT_ERROR,
    SUCCESS,
    TARGET_ERROR,
    TASK_FAILURE,
    UNKNOWN_TARGET,
    ScriptError,
)
from pygant.state import RunState, Verbosity, run_state
from helpers.engine import RecordingEngine
from helpers.io import captured_logger


class DriverTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = RecordingEngine(failing=("fail",))
        self.logger, self.buffer = captured_logger()
        self.gant = Gant(logger=self.logger, engine=self.engine)
        self.stdout = io.StringIO()

    def run_script(self, script, targets=None):
        with redirect_stdout(self.stdout):
            self.gant.load_script(script)
            return self.gant.process_targets(targets)


class TestConstruction(DriverTestCase):
    def test_construction_resets_run_state(self):
        run_state.set_verbosity(Verbosity.DEBUG)
        run_state.set_dry_run(True)
        Gant(logger=self.logger, engine=self.engine)
        self.assertEqual(run_state.verbosity, Verbosity.NORMAL)
        self.assertFalse(run_state.dry_run)

    def test_private_state(self):
        state = RunState()
        state.set_dry_run(True)
        gant = Gant(logger=self.logger, engine=self.engine, state=state)
        self.assertFalse(state.dry_run)
        self.assertIs(gant.state, state)

    def test_binding_gets_script_surface(self):
        for name in ("target", "depends", "build", "ant", "Ant"):
            self.assertIn(name, self.gant.binding)
        self.assertIs(self.gant.binding.get("ant"), self.gant.builder)

    def test_existing_builder_is_kept(self):
        builder = object()
        gant = Gant(binding=Binding(builder), logger=self.logger)
        self.assertIs(gant.builder, builder)

    def test_separate_drivers_have_separate_executed_sets(self):
        script = "@target(name='a')\ndef a():\n    print('A')\n"
        first = Gant(logger=self.logger, engine=self.engine)
        second = Gant(logger=self.logger, engine=self.engine)
        with redirect_stdout(self.stdout):
            first.load_script(script).process_targets("a")
            second.load_script(script).process_targets("a")
        self.assertEqual(self.stdout.getvalue(), "A\nA\n")


class TestProcessTargets(DriverTestCase):
    def test_single_target(self):
        code = self.run_script(
            """
@target(name="hello")
def hello():
    print("hi")
""",
            ["hello"],
        )
        self.assertEqual(code, SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "hi\n")

    def test_default_target(self):
        script = f"""
@target(name="{DEFAULT_TARGET}")
def default():
    print("default ran")
"""
        self.assertEqual(self.run_script(script), SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "default ran\n")

    def test_empty_list_means_default(self):
        script = "@target(name='default')\ndef d():\n    print('d')\n"
        self.assertEqual(self.run_script(script, []), SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "d\n")

    def test_string_target(self):
        script = "@target(name='a')\ndef a():\n    print('a')\n"
        self.assertEqual(self.run_script(script, "a"), SUCCESS)

    def test_dependency_runs_first(self):
        script = """
@target(name="a")
def a():
    depends("b")
    print("A")

@target(name="b")
def b():
    print("B")
"""
        self.assertEqual(self.run_script(script, ["a"]), SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "B\nA\n")

    def test_shared_dependency_runs_once(self):
        script = """
@target(name="a")
def a():
    depends(["b", "c"])

@target(name="b")
def b():
    depends("c")

@target(name="c")
def c():
    print("C")
"""
        self.assertEqual(self.run_script(script, ["a"]), SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "C\n")

    def test_targets_share_one_executed_set(self):
        script = """
@target(name="init")
def init():
    print("init")

@target(name="compile")
def compile_():
    depends("init")
    print("compile")

@target(name="test")
def test():
    depends("init", "compile")
    print("test")
"""
        self.assertEqual(self.run_script(script, ["compile", "test"]), SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "init\ncompile\ntest\n")

    def test_unknown_target(self):
        code = self.run_script("@target(name='a')\ndef a():\n    pass\n", ["nope"])
        self.assertEqual(code, UNKNOWN_TARGET)
        self.assertIn("nope", self.buffer.getvalue())

    def test_missing_default_target(self):
        self.assertEqual(self.run_script("x = 1\n"), UNKNOWN_TARGET)
        self.assertIn("Target default does not exist.", self.buffer.getvalue())

    def test_binding_name_that_is_not_a_target(self):
        self.assertEqual(self.run_script("def helper():\n    pass\n", ["helper"]), UNKNOWN_TARGET)

    def test_stops_at_first_failure(self):
        script = """
@target(name="a")
def a():
    print("a")

@target(name="b")
def b():
    raise RuntimeError("b broke")

@target(name="c")
def c():
    print("c")
"""
        code = self.run_script(script, ["a", "b", "c"])
        self.assertEqual(code, TARGET_ERROR)
        self.assertEqual(self.stdout.getvalue(), "a\n")
        self.assertIn("RuntimeError: b broke", self.buffer.getvalue())

    def test_missing_method(self):
        script = """
@target(name="a")
def a():
    build.frobnicate(level=3)
"""
        self.assertEqual(self.run_script(script, ["a"]), TARGET_ERROR)
        self.assertIn("frobnicate", self.buffer.getvalue())

    def test_unknown_name_with_positional_argument(self):
        script = """
@target(name="a")
def a():
    build.frobnicate("x")
"""
        self.assertEqual(self.run_script(script, ["a"]), TARGET_ERROR)
        self.assertEqual(self.buffer.getvalue(), "No target, function or task named 'frobnicate'.\n")

    def test_task_failure(self):
        script = """
@target(name="a")
def a():
    ant.fail(message="stop")
"""
        self.assertEqual(self.run_script(script, ["a"]), TASK_FAILURE)
        self.assertIn("[fail] failed", self.buffer.getvalue())

    def test_unknown_dependency(self):
        script = """
@target(name="a")
def a():
    depends("missing")
"""
        self.assertEqual(self.run_script(script, ["a"]), TARGET_ERROR)
        self.assertIn("depends called with an argument (missing)", self.buffer.getvalue())

    def test_task_calls_reach_engine(self):
        script = """
@target(name="a")
def a():
    ant.mkdir(dir="build")
    Ant.copy(file="x", todir="build")
    build.echo(message="done")
"""
        self.assertEqual(self.run_script(script, ["a"]), SUCCESS)
        self.assertEqual(self.engine.names(), ["mkdir", "copy", "echo"])

    def test_target_called_by_name_is_not_rerun_by_depends(self):
        script = """
@target(name="a")
def a():
    build.b()
    depends("b")

@target(name="b")
def b():
    print("B")
"""
        self.assertEqual(self.run_script(script, ["a"]), SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "B\n")

    def test_reset_executed_starts_a_new_run(self):
        script = "@target(name='a')\ndef a():\n    print('A')\n"
        self.run_script(script, ["a"])
        self.gant.reset_executed()
        with redirect_stdout(self.stdout):
            self.gant.process_targets(["a"])
        self.assertEqual(self.stdout.getvalue(), "A\nA\n")


class TestDryRun(DriverTestCase):
    SCRIPT = """
@target(name="t")
def t():
    ant.copy(file="x", todir="y")
"""

    def test_trace_is_printed_and_engine_untouched(self):
        self.gant.state.set_dry_run(True)
        self.assertEqual(self.run_script(self.SCRIPT, ["t"]), SUCCESS)
        self.assertEqual(self.buffer.getvalue(), "    [copy] file : 'x' , todir : 'y'\n")
        self.assertEqual(self.engine.calls, [])

    def test_silent_dry_run_prints_nothing(self):
        self.gant.state.set_dry_run(True)
        self.gant.state.set_verbosity(Verbosity.SILENT)
        self.assertEqual(self.run_script(self.SCRIPT, ["t"]), SUCCESS)
        self.assertEqual(self.buffer.getvalue(), "")
        self.assertEqual(self.engine.calls, [])

    def test_unknown_task_names_are_traced_too(self):
        self.gant.state.set_dry_run(True)
        script = "@target(name='t')\ndef t():\n    build.frobnicate(a=1)\n"
        self.assertEqual(self.run_script(script, ["t"]), SUCCESS)
        self.assertEqual(self.buffer.getvalue(), "[frobnicate] a : '1'\n")


class TestLoadScript(DriverTestCase):
    def test_returns_self(self):
        self.assertIs(self.gant.load_script("x = 1\n"), self.gant)
        self.assertEqual(self.gant.binding.get("x"), 1)

    def test_loads_from_path_and_string_path(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "build.gant"
            path.write_text("@target(name='a')\ndef a():\n    pass\n")
            self.gant.load_script(path)
            self.assertIn("a", self.gant.registry)

            other = Gant(logger=self.logger, engine=self.engine)
            other.load_script(str(path))
            self.assertIn("a", other.registry)
            self.assertEqual(other.binding.get("__file__"), str(path))

    def test_script_text_uses_build_class_name(self):
        self.gant.set_build_class_name("custom_build")
        with self.assertRaises(ScriptError) as cm:
            self.gant.load_script("def broken(:\n")
        self.assertIn("custom_build", str(cm.exception))
        self.assertEqual(cm.exception.exit_code, SCRIPT_ERROR)

    def test_script_reads_definitions(self):
        self.gant.define("greeting", "hello")
        self.assertEqual(self.run_script("@target(name='a')\ndef a():\n    print(greeting)\n", "a"), SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "hello\n")
        self.assertEqual(self.engine.properties, {"greeting": "hello"})

    def test_target_descriptions(self):
        self.gant.load_script(
            """
@target(name="compile", description="Compile the sources")
def compile_():
    pass

@target
def clean():
    "Remove build output"
"""
        )
        self.assertEqual(
            self.gant.target_descriptions(),
            [("clean", "Remove build output"), ("compile", "Compile the sources")],
        )
