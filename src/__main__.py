#!/usr/bin/env python3
"""
markuptree - Markup-to-tree compiler with integrated sanitization

Compiles HTML/JSX-style markup files into sanitized output trees (JSON) and
reference HTML renderings.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Safe by default: <script> and on* handlers never survive compilation
    - Deterministic: same markup and configuration, same tree
    - Host-agnostic: the tree is data; rendering is a separate step

Usage:
    markuptree inputdir/ outputdir/ --pattern "*.jsx"

    Every matching file in inputdir/ produces <name>.json (the output tree)
    and <name>.html (the reference rendering) in outputdir/.

Examples:
    # Basic compilation
    markuptree src/ out/

    # Register components and default bindings
    markuptree src/ out/ --components Custom,Card --bindings bindings.yaml

    # Extra blacklist entries, verbose output
    markuptree src/ out/ --blacklistTags iframe --blacklistAttrs "data-[a-z]*" -vv
"""

import json
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import Any, Callable, Dict, List

import yaml
from chris_plugin import chris_plugin

from .config import appsettings
from .lib import Compiler, Renderer, MarkupSyntaxError, NestingDepthError, __version__, LOG, state_connectToLogger
from .lib.sanitizer import BlacklistPatternError
from .lib.lexer import source_highlight
from .models import ProgramState, pipeline, NativeElement, tree_toDict


DISPLAY_TITLE = r"""
                       _               _
  _ __ ___   __ _ _ __| | ___   _ _ __ | |_ _ __ ___  ___
 | '_ ` _ \ / _` | '__| |/ / | | | '_ \| __| '__/ _ \/ _ \
 | | | | | | (_| | |  |   <| |_| | |_) | |_| | |  __/  __/
 |_| |_| |_|\__,_|_|  |_|\_\\__,_| .__/ \__|_|  \___|\___|
                                 |_|
  Markup-to-tree compiler
"""

# Define CLI arguments
parser = ArgumentParser(
    description="markuptree - compile markup into sanitized render trees",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern", default="*.jsx", type=str, help="Glob selecting markup files inside inputdir"
)

parser.add_argument(
    "--components",
    default="",
    type=str,
    help="Comma-separated component names to register (rendered as passthrough containers)",
)

parser.add_argument(
    "--bindings",
    dest="bindingsFile",
    default=None,
    type=str,
    help="YAML file mapping attribute names to default values (relative to inputdir)",
)

parser.add_argument(
    "--blacklistTags", default="", type=str, help="Comma-separated extra tag blacklist entries"
)

parser.add_argument(
    "--blacklistAttrs", default="", type=str, help="Comma-separated extra attribute blacklist entries"
)

parser.add_argument(
    "--maxDepth", default=None, type=int, help="Maximum markup nesting depth (defaults to settings)"
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def passthrough_make(name: str) -> Callable[[Dict[str, Any], List[Any]], NativeElement]:
    """
    Definition for a component registered from the command line

    Renders the component's children inside <div data-component="name">,
    keeping className when one was given.
    """

    def passthrough(props: Dict[str, Any], children: List[Any]) -> NativeElement:
        container_props = {"data-component": name}
        if "className" in props:
            container_props["className"] = props["className"]
        return NativeElement(tag_name="div", props=container_props, children=children)

    passthrough.__name__ = name
    return passthrough


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve inputs.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputFiles: Markup files matching the pattern
            - bindings: Loaded default bindings
            - envOK: True if environment is valid

    Exits:
        1 if no input files match or the bindings file is unusable
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    state.inputFiles = sorted(p for p in state.inputdir.glob(state.pattern) if p.is_file())
    if not state.inputFiles:
        print(f"Error: No files matching '{state.pattern}' in {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    LOG(f"Found {len(state.inputFiles)} markup file(s)", level=2)

    if state.bindingsFile:
        bindings_path = state.inputdir / state.bindingsFile
        try:
            loaded = yaml.safe_load(bindings_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            print(f"Error: Cannot load bindings from {bindings_path}: {e}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            print(f"Error: Bindings file {bindings_path} must contain a mapping", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.bindings = {str(key): value for key, value in loaded.items()}
        LOG(f"Loaded {len(state.bindings)} binding(s) from {bindings_path.name}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def sources_compile(inputstate: ProgramState) -> ProgramState:
    """
    Read and compile every markup file into an output tree.

    Args:
        inputstate: Program state with inputFiles set

    Returns:
        ProgramState with added fields:
            - compiledTrees: Path -> List[OutputNode]
            - unrecognizedTags: Path -> unrecognized tag names found

    Exits:
        1 on unreadable files, malformed markup, excessive nesting or
        invalid blacklist patterns
    """

    state = inputstate.copy()
    state.compiledTrees = {}
    state.unrecognizedTags = {}

    registry = {name: passthrough_make(name) for name in ProgramState.list_split(state.components)}
    LOG(f"Registered components: {', '.join(registry) or '(none)'}", level=2)

    for source_file in state.inputFiles:
        LOG(f"Compiling {source_file.name}...", level=1)
        try:
            source = source_file.read_text(encoding="utf-8")
        except OSError as e:
            print(f"Error reading {source_file}: {e}", file=sys.stderr)
            sys.exit(1)

        if state.verbosity >= 3:
            LOG("\n" + source_highlight(source), level=3)

        unrecognized: List[str] = []
        compiler = Compiler(
            registry=registry,
            bindings=state.bindings,
            blacklisted_tags=ProgramState.list_split(state.blacklistTags),
            blacklisted_attrs=ProgramState.list_split(state.blacklistAttrs),
            max_depth=state.maxDepth,
            on_unrecognized=unrecognized.append,
            debug=(state.verbosity >= 3 or appsettings.debug_mode),
        )
        try:
            state.compiledTrees[source_file] = compiler.compile(source)
        except MarkupSyntaxError as e:
            print(f"Parse error in {source_file.name}: {e}", file=sys.stderr)
            sys.exit(1)
        except (NestingDepthError, BlacklistPatternError) as e:
            print(f"Compilation error in {source_file.name}: {e}", file=sys.stderr)
            sys.exit(1)

        state.unrecognizedTags[source_file] = unrecognized
        if unrecognized and appsettings.strict_mode:
            print(
                f"Error: Unrecognized tags in {source_file.name}: {', '.join(sorted(set(unrecognized)))}",
                file=sys.stderr,
            )
            sys.exit(1)

    return state


def outputs_write(inputstate: ProgramState) -> ProgramState:
    """
    Write JSON trees and reference HTML renderings.

    Args:
        inputstate: Program state with compiledTrees

    Returns:
        ProgramState with added field:
            - compileResult: Dict containing:
                - status: bool
                - file_count: int
                - outputs: List[str] (paths written)

    Exits:
        1 if compiledTrees is missing or a component definition fails
    """

    state = inputstate.copy()

    if state.compiledTrees is None:
        print("Error: No compiled trees available", file=sys.stderr)
        sys.exit(1)

    renderer = Renderer()
    outputs: List[str] = []

    for source_file, nodes in state.compiledTrees.items():
        json_file = state.outputdir / f"{source_file.stem}.json"
        json_file.write_text(json.dumps(tree_toDict(nodes), indent=2, ensure_ascii=False), encoding="utf-8")

        try:
            rendered = renderer.render(nodes)
        except Exception as e:
            print(f"Render error in {source_file.name}: {e}", file=sys.stderr)
            if state.verbosity >= 3:
                import traceback

                traceback.print_exc()
            sys.exit(1)

        html_file = state.outputdir / f"{source_file.stem}.html"
        html_file.write_text(rendered, encoding="utf-8")
        outputs.extend([str(json_file), str(html_file)])
        LOG(f"Wrote {json_file.name} and {html_file.name}", level=2)

    state.compileResult = {
        "status": True,
        "file_count": len(state.compiledTrees),
        "outputs": outputs,
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results to the user.

    Args:
        inputstate: Program state with compileResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if compileResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.compileResult:
        print("Error: Compilation failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Compilation successful!", level=1)
    LOG(f"  Files:  {state.compileResult['file_count']}", level=1)
    LOG(f"  Output: {state.outputdir}", level=1)
    for source_file, tags in state.unrecognizedTags.items():
        if tags:
            LOG(f"  {source_file.name}: unrecognized tags {', '.join(sorted(set(tags)))}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="markuptree - markup-to-tree compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compile markup files to output trees.

    Orchestrates the full compilation pipeline:
        1. env_check: Resolve input files, load bindings
        2. sources_compile: Parse and build each file's output tree
        3. outputs_write: Write JSON trees and HTML renderings
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, sources_compile, outputs_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
