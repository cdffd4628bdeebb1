"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    State bus carried through the markuptree CLI pipeline.

    Every stage receives a copy, fills in the fields it owns and hands it on;
    nothing is mutated in place once a stage has returned.

    Fields contributed per stage:
        - Initial: inputdir, outputdir, verbosity, pattern, components,
          bindingsFile, blacklistTags, blacklistAttrs, maxDepth
        - env_check: inputFiles, bindings, envOK
        - sources_compile: compiledTrees, unrecognizedTags
        - outputs_write: compileResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing markup source files
        outputdir: Directory for the generated .json/.html files
        verbosity: Logging verbosity level (1-3)
        pattern: Glob selecting markup files inside inputdir
        components: Comma-separated component names to register
        bindingsFile: Optional YAML file with default attribute bindings
        blacklistTags: Comma-separated extra tag blacklist entries
        blacklistAttrs: Comma-separated extra attribute blacklist entries
        maxDepth: Optional nesting limit overriding the settings default
        envOK: Environment validation passed
        inputFiles: Resolved markup files to compile
        bindings: Bindings loaded from bindingsFile
        compiledTrees: Output trees keyed by source file
        unrecognizedTags: Unrecognized tag names keyed by source file
        compileResult: Summary (status, file_count, outputs)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    pattern: str = field(default="*.jsx")
    components: str = field(default="")
    bindingsFile: Optional[str] = field(default=None)
    blacklistTags: str = field(default="")
    blacklistAttrs: str = field(default="")
    maxDepth: Optional[int] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputFiles: List[Path] = field(default_factory=list)
    bindings: Dict[str, Any] = field(default_factory=dict)
    compiledTrees: Optional[Dict[Path, List[Any]]] = field(default=None)  # List[OutputNode] at runtime
    unrecognizedTags: Dict[Path, List[str]] = field(default_factory=dict)
    compileResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing markup files
            outputdir: Directory for compilation output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown CLI options (added by chris_plugin, for instance) are ignored
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}

        return cls(**{**filtered_options, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """
        Shallow copy, so a stage never mutates the state it was given.

        Returns:
            New ProgramState sharing field values with this one.
        """
        return type(self)(**self.__dict__)

    @staticmethod
    def list_split(value: str) -> List[str]:
        """Split a comma-separated CLI value, dropping blanks"""
        return [item.strip() for item in value.split(',') if item.strip()]


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Thread a state through stages, left to right.

    A stage maps ProgramState -> ProgramState; each one gets
    what its predecessor returned.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            sources_compile,
            outputs_write,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
