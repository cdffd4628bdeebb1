"""
Command line pipeline tests

Tests each pipeline stage on a temporary input/output directory pair,
including the sys.exit() paths for unusable input.
"""

import json

import pytest

from markuptree.__main__ import (
    env_check,
    outputs_write,
    passthrough_make,
    results_report,
    sources_compile,
)
from markuptree.config import appsettings
from markuptree.models import ProgramState, pipeline


@pytest.fixture
def dirs(tmp_path):
    inputdir = tmp_path / "in"
    outputdir = tmp_path / "out"
    inputdir.mkdir()
    return inputdir, outputdir


def state_make(dirs, **options):
    inputdir, outputdir = dirs
    return ProgramState(inputdir=inputdir, outputdir=outputdir, verbosity=0, **options)


class TestEnvCheck:
    """Test input discovery and bindings loading"""

    def test_files_found(self, dirs):
        (dirs[0] / "b.jsx").write_text("<p />")
        (dirs[0] / "a.jsx").write_text("<p />")
        (dirs[0] / "notes.txt").write_text("skip")
        state = env_check(state_make(dirs))
        assert [path.name for path in state.inputFiles] == ["a.jsx", "b.jsx"]
        assert state.envOK
        assert dirs[1].is_dir()

    def test_no_files_exits(self, dirs):
        with pytest.raises(SystemExit) as info:
            env_check(state_make(dirs))
        assert info.value.code == 1

    def test_bindings_loaded(self, dirs):
        (dirs[0] / "page.jsx").write_text("<p />")
        (dirs[0] / "bindings.yaml").write_text("lang: en\ntabindex: 0\n")
        state = env_check(state_make(dirs, bindingsFile="bindings.yaml"))
        assert state.bindings == {"lang": "en", "tabindex": 0}

    def test_empty_bindings_file(self, dirs):
        (dirs[0] / "page.jsx").write_text("<p />")
        (dirs[0] / "bindings.yaml").write_text("")
        assert env_check(state_make(dirs, bindingsFile="bindings.yaml")).bindings == {}

    @pytest.mark.parametrize("content", ["- a\n- b\n", "key: [unclosed\n"])
    def test_bad_bindings_exit(self, dirs, content):
        (dirs[0] / "page.jsx").write_text("<p />")
        (dirs[0] / "bindings.yaml").write_text(content)
        with pytest.raises(SystemExit):
            env_check(state_make(dirs, bindingsFile="bindings.yaml"))

    def test_missing_bindings_exit(self, dirs):
        (dirs[0] / "page.jsx").write_text("<p />")
        with pytest.raises(SystemExit):
            env_check(state_make(dirs, bindingsFile="absent.yaml"))


class TestSourcesCompile:
    """Test per-file compilation"""

    def test_components_and_unrecognized(self, dirs):
        (dirs[0] / "page.jsx").write_text('<Card className="c"><Mystery /></Card>')
        state = sources_compile(env_check(state_make(dirs, components="Card, ")))
        [nodes] = state.compiledTrees.values()
        assert nodes[0].component_name == "Card"
        assert list(state.unrecognizedTags.values()) == [["Mystery"]]

    def test_cli_blacklists(self, dirs):
        (dirs[0] / "page.jsx").write_text('<div data-x="1" id="k"><iframe /></div>')
        state = sources_compile(env_check(state_make(
            dirs, blacklistTags="iframe", blacklistAttrs="data-[a-z]*",
        )))
        [nodes] = state.compiledTrees.values()
        assert nodes[0].props == {"id": "k"}
        assert nodes[0].children == []

    def test_syntax_error_exits(self, dirs):
        (dirs[0] / "page.jsx").write_text("<div>")
        state = env_check(state_make(dirs))
        with pytest.raises(SystemExit):
            sources_compile(state)

    def test_depth_error_exits(self, dirs):
        (dirs[0] / "page.jsx").write_text("<a><b>x</b></a>")
        state = env_check(state_make(dirs, maxDepth=1))
        with pytest.raises(SystemExit):
            sources_compile(state)

    def test_bad_pattern_exits(self, dirs):
        (dirs[0] / "page.jsx").write_text("<p />")
        state = env_check(state_make(dirs, blacklistAttrs="data-[x"))
        with pytest.raises(SystemExit):
            sources_compile(state)

    def test_strict_mode(self, dirs, monkeypatch):
        (dirs[0] / "page.jsx").write_text("<Mystery />")
        monkeypatch.setattr(appsettings, "strict_mode", True)
        with pytest.raises(SystemExit):
            sources_compile(env_check(state_make(dirs)))


class TestOutputs:
    """Test written files and the report stage"""

    def test_full_pipeline(self, dirs, monkeypatch):
        monkeypatch.setattr(appsettings, "render_in_wrapper", False)
        (dirs[0] / "page.jsx").write_text('<Card><p class="x">Hi</p></Card><script>x()</script>')
        state = pipeline(
            state_make(dirs, components="Card"),
            env_check, sources_compile, outputs_write, results_report,
        )
        assert state.compileResult["status"] is True
        assert state.compileResult["file_count"] == 1

        tree = json.loads((dirs[1] / "page.json").read_text())
        assert tree[0]["componentName"] == "Card"
        assert tree[0]["children"][0]["props"] == {"className": "x"}
        html = (dirs[1] / "page.html").read_text()
        assert html == '<div data-component="Card"><p class="x">Hi</p></div>'

    def test_missing_trees_exit(self, dirs):
        with pytest.raises(SystemExit):
            outputs_write(state_make(dirs))

    def test_report_without_result_exits(self, dirs):
        with pytest.raises(SystemExit):
            results_report(state_make(dirs))


class TestPassthrough:
    """Test command-line component definitions"""

    def test_keeps_class_name(self):
        Card = passthrough_make("Card")
        element = Card({"className": "c", "other": 1}, ["child"])
        assert element.tag_name == "div"
        assert element.props == {"data-component": "Card", "className": "c"}
        assert element.children == ["child"]

    def test_list_split(self):
        assert ProgramState.list_split(" a, ,b,") == ["a", "b"]
