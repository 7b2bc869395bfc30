from __future__ import annotations

import sys

import pytest

from conftest import FakeCompiler, FakeDevServer
from packmap import CompilationError, PackType
from packmap.compiler import CommandCompiler


def test_compile_runs_before_lookup(make_manifest, write_manifest):
    compiler = FakeCompiler(on_compile=lambda: write_manifest({"a.js": "/packs/a-1.js"}))
    manifest = make_manifest(compiler=compiler, compile=True)

    assert manifest.lookup("a.js") == "/packs/a-1.js"
    assert manifest.lookup_pack_with_chunks("a", PackType.JAVASCRIPT) is None
    assert compiler.calls == 2


def test_no_compile_when_disabled(make_manifest, write_manifest):
    write_manifest({})
    compiler = FakeCompiler()
    manifest = make_manifest(compiler=compiler)

    manifest.lookup("a.js")
    assert compiler.calls == 0


def test_no_compile_while_dev_server_running(make_manifest, write_manifest):
    write_manifest({})
    compiler = FakeCompiler()
    manifest = make_manifest(compiler=compiler, dev_server=FakeDevServer(running=True), compile=True)

    manifest.lookup("a.js")
    manifest.lookup_pack_with_chunks("a.js")
    assert compiler.calls == 0


def test_compiler_failure_propagates(make_manifest):
    class Broken:
        def compile(self):
            raise CompilationError(["build"], 2, "syntax error")

    manifest = make_manifest(compiler=Broken(), compile=True)
    with pytest.raises(CompilationError) as info:
        manifest.lookup("a.js")
    assert info.value.returncode == 2
    assert manifest.data is None


def test_command_compiler_success(tmp_path):
    out = tmp_path / "built.txt"
    compiler = CommandCompiler([sys.executable, "-c", f"open({str(out)!r}, 'w').write('ok')"])
    compiler.compile()
    assert out.read_text() == "ok"


def test_command_compiler_failure_captures_output():
    compiler = CommandCompiler([sys.executable, "-c", "import sys; print('bad config'); sys.exit(3)"])
    with pytest.raises(CompilationError) as info:
        compiler.compile()
    assert info.value.returncode == 3
    assert "bad config" in info.value.output


def test_command_compiler_from_settings(make_settings):
    compiler = CommandCompiler.from_settings(make_settings(compile_command="npx webpack --mode production"))
    assert compiler.argv == ["npx", "webpack", "--mode", "production"]

    with pytest.raises(ValueError):
        CommandCompiler([])
