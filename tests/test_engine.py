"""
Execution engine tests

Processes are replaced by a recording runner, so these tests check what
would be spawned, in which order, and what reaches the output channel.
"""

import io
import subprocess

import pytest

from sourcegen.config.settings import AppSettings, FailurePolicy
from sourcegen.lib.engine import Engine
from sourcegen.lib.errors import NonZeroExit, SpawnFailure, UnterminatedQuote
from sourcegen.lib.parser import DirectiveParser
from sourcegen.models.module import Module
from sourcegen.models.options import GenerateOptions


MARKER = "//sourcegen:generate"


class RecordingRunner:
    """Stand-in for subprocess.run that records calls"""

    def __init__(self, returncode=0, stdout=b"", stderr=b"", missing=()):
        self.calls = []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.missing = set(missing)

    def __call__(self, argv, env=None, capture_output=False, check=False):
        self.calls.append({"argv": list(argv), "env": dict(env), "capture_output": capture_output})
        if argv[0] in self.missing:
            raise FileNotFoundError(2, "No such file or directory", argv[0])
        return subprocess.CompletedProcess(argv, self.returncode, self.stdout, self.stderr)


def engine_make(runner, output=None, **options):
    return Engine(
        options=GenerateOptions(**options),
        settings=AppSettings(),
        output=output if output is not None else io.StringIO(),
        base_env={"PATH": "/usr/bin"},
        runner=runner,
    )


def module_make(*lines, specifier="file:///repo/src/mod.ts"):
    return Module(specifier, "\n".join(lines))


def engine_parse(module):
    return DirectiveParser(specifier=module.specifier).parse(module.source_text)


class TestInvocation:
    """Test what gets spawned"""

    def test_runs_directives_in_source_order(self):
        runner = RecordingRunner()
        engine = engine_make(runner)
        engine.module_run(module_make(
            f"{MARKER} echo first",
            "const x = 1;",
            f"{MARKER} echo second",
        ))

        assert [call["argv"] for call in runner.calls] == [
            ["echo", "first"],
            ["echo", "second"],
        ]

    def test_output_is_captured(self):
        runner = RecordingRunner()
        engine_make(runner).module_run(module_make(f"{MARKER} echo hi"))
        assert runner.calls[0]["capture_output"] is True

    def test_alias_definitions_are_not_run(self):
        runner = RecordingRunner()
        results = engine_make(runner).module_run(module_make(
            f"{MARKER} build=make -j4",
            f"{MARKER} build extra",
        ))

        assert [call["argv"] for call in runner.calls] == [["make", "-j4", "extra"]]
        assert len(results) == 1

    def test_environment(self):
        runner = RecordingRunner()
        engine_make(runner).module_run(module_make("", f"  {MARKER} env"))
        env = runner.calls[0]["env"]

        assert env["PATH"] == "/usr/bin"
        assert env["SOURCEGEN_MODULE"] == "file:///repo/src/mod.ts"
        assert env["SOURCEGEN_LINE"] == "2"
        assert env["SOURCEGEN_CHARACTER"] == "3"
        assert env["SOURCEGEN_DIR"].endswith("src")
        assert env["DOLLAR"] == "$"

    def test_invocation_build(self):
        engine = engine_make(RecordingRunner())
        module = module_make(f"{MARKER} cmd=echo hi", f"{MARKER} cmd there")
        directive = [d for d in engine_parse(module) if d.runnable_is][0]

        invocation = engine.invocation_build(module, directive)

        assert invocation.program == "echo"
        assert invocation.args == ["hi", "there"]
        assert invocation.argv == ["echo", "hi", "there"]


class TestOutputChannel:
    """Test verbose/dry-run/trace reporting"""

    def test_stdout_and_stderr_always_forwarded(self):
        output = io.StringIO()
        runner = RecordingRunner(stdout=b"made it\n", stderr=b"warn\n")
        engine_make(runner, output=output).module_run(module_make(f"{MARKER} gen"))

        assert output.getvalue() == "stdout: made it\n\nstderr: warn\n\n"

    def test_verbose_announces_command(self):
        output = io.StringIO()
        engine_make(RecordingRunner(), output=output, verbose=True).module_run(
            module_make(f"{MARKER} echo 'a b'")
        )
        first_line = output.getvalue().splitlines()[0]
        assert first_line == "Running echo 'a b' in <file:///repo/src/mod.ts>"

    def test_trace_reports_exit_status(self):
        output = io.StringIO()
        engine_make(RecordingRunner(returncode=3), output=output, trace=True).module_run(
            module_make(f"{MARKER} false")
        )
        assert output.getvalue().splitlines()[-1] == "exit status 3"

    def test_no_exit_status_without_trace(self):
        output = io.StringIO()
        engine_make(RecordingRunner(returncode=3), output=output).module_run(
            module_make(f"{MARKER} false")
        )
        assert "exit status" not in output.getvalue()

    def test_dry_run_spawns_nothing(self):
        output = io.StringIO()
        runner = RecordingRunner()
        results = engine_make(runner, output=output, dry_run=True, verbose=True).module_run(
            module_make(f"{MARKER} build=make -j4", f"{MARKER} build extra")
        )

        assert runner.calls == []
        assert output.getvalue().splitlines() == [
            "Running make -j4 extra in <file:///repo/src/mod.ts>"
        ]
        assert results[0].skipped
        assert results[0].returncode is None

    def test_dry_run_without_verbose_is_silent(self):
        output = io.StringIO()
        engine_make(RecordingRunner(), output=output, dry_run=True).module_run(
            module_make(f"{MARKER} echo hi")
        )
        assert output.getvalue() == ""

    def test_undecodable_output_replaced(self):
        runner = RecordingRunner(stdout=b"ok \xff")
        results = engine_make(runner).module_run(module_make(f"{MARKER} gen"))
        assert results[0].stdout == "ok \ufffd"


class TestFiltering:
    """Test run/skip inside the engine"""

    def test_skip_regex(self):
        runner = RecordingRunner()
        engine = engine_make(runner, skip="slow")
        engine.module_run(module_make(f"{MARKER} echo fast", f"{MARKER} echo slow"))

        assert [call["argv"] for call in runner.calls] == [["echo", "fast"]]
        assert engine.directives_filtered == 1

    def test_filtered_alias_definition_still_registered(self):
        """run/skip only apply to runnable directives"""
        runner = RecordingRunner()
        engine_make(runner, run="extra").module_run(
            module_make(f"{MARKER} build=make -j4", f"{MARKER} build extra")
        )
        assert [call["argv"] for call in runner.calls] == [["make", "-j4", "extra"]]


class TestFailures:
    """Test spawn failures, non-zero exits and their policies"""

    def test_spawn_failure_continues_by_default(self):
        output = io.StringIO()
        runner = RecordingRunner(missing={"nope"})
        results = engine_make(runner, output=output).module_run(
            module_make(f"{MARKER} nope", f"{MARKER} echo after")
        )

        assert isinstance(results[0].error, SpawnFailure)
        assert results[0].error.line == 1
        assert results[0].error.specifier == "file:///repo/src/mod.ts"
        assert runner.calls[-1]["argv"] == ["echo", "after"]
        assert "error: file:///repo/src/mod.ts:1:1: failed to run 'nope'" in output.getvalue()

    def test_spawn_failure_abort(self):
        runner = RecordingRunner(missing={"nope"})
        engine = engine_make(runner, on_spawn_failure=FailurePolicy.ABORT)

        with pytest.raises(SpawnFailure):
            engine.module_run(module_make(f"{MARKER} nope", f"{MARKER} echo after"))
        assert len(runner.calls) == 1

    def test_nonzero_exit_recorded(self):
        runner = RecordingRunner(returncode=1)
        results = engine_make(runner).module_run(module_make(f"{MARKER} false", f"{MARKER} false"))

        assert len(results) == 2
        assert all(isinstance(result.error, NonZeroExit) for result in results)
        assert not results[0].ok

    def test_nonzero_exit_abort_after_output(self):
        output = io.StringIO()
        runner = RecordingRunner(returncode=2, stderr=b"boom")
        engine = engine_make(runner, output=output, on_nonzero_exit="abort")

        with pytest.raises(NonZeroExit) as excinfo:
            engine.module_run(module_make(f"{MARKER} false", f"{MARKER} echo never"))

        assert excinfo.value.returncode == 2
        assert "stderr: boom" in output.getvalue()
        assert len(runner.calls) == 1

    def test_policy_defaults_from_engine_settings(self):
        """Without a policy in the options the engine's settings decide"""
        runner = RecordingRunner(returncode=1)
        engine = Engine(
            settings=AppSettings(on_nonzero_exit=FailurePolicy.ABORT, _env_file=None),
            output=io.StringIO(),
            base_env={},
            runner=runner,
        )

        with pytest.raises(NonZeroExit):
            engine.module_run(module_make(f"{MARKER} false", f"{MARKER} echo never"))
        assert [call["argv"] for call in runner.calls] == [["false"]]

    def test_options_policy_overrides_settings(self):
        runner = RecordingRunner(missing={"nope"})
        engine = Engine(
            options=GenerateOptions(on_spawn_failure="continue"),
            settings=AppSettings(on_spawn_failure=FailurePolicy.ABORT, _env_file=None),
            output=io.StringIO(),
            base_env={},
            runner=runner,
        )

        results = engine.module_run(module_make(f"{MARKER} nope", f"{MARKER} echo after"))

        assert isinstance(results[0].error, SpawnFailure)
        assert runner.calls[-1]["argv"] == ["echo", "after"]

    def test_parse_error_runs_nothing(self):
        runner = RecordingRunner()
        with pytest.raises(UnterminatedQuote) as excinfo:
            engine_make(runner).module_run(module_make(f"{MARKER} echo ok", f"{MARKER} echo 'bad"))

        assert runner.calls == []
        assert excinfo.value.specifier == "file:///repo/src/mod.ts"
        assert excinfo.value.line == 2
