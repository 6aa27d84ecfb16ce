"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from .document import Document
    from .options import RunOptions


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the rendering pipeline (state bus pattern).

    Each stage of the CLI pipeline receives a copy of the state and adds the
    fields it produces.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFile,
          section, page, timeout, parseOnly
        - env_check: inputSourceFile, outputTargetFile, runOptions, envOK
        - source_read: sourceText
        - document_process: renderedOutput
        - output_write: (writes renderedOutput to outputTargetFile)
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source document
        outputdir: Directory the rendered document is written to
        verbosity: Logging verbosity level (1-3)
        inputFile: Source filename (relative to inputdir)
        outputFile: Output filename (relative to outputdir); defaults to inputFile
        section: Explicit first-section number (0 = use the document's own)
        page: Render only this section (0 = all)
        timeout: Seconds allowed for the whole run (0 = configured default)
        parseOnly: Skip execution of embedded code
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the source document
        outputTargetFile: Resolved path of the rendered output
        runOptions: Resolved RunOptions for the engine
        sourceText: Raw markup read from inputSourceFile
        document: Parsed (and executed) Document
        renderedOutput: Final rendered text
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputFile: str = field(default="")
    section: int = field(default=0)
    page: int = field(default=0)
    timeout: float = field(default=0.0)
    parseOnly: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputTargetFile: Path = field(default=Path("/"))
    runOptions: Optional["RunOptions"] = field(default=None)
    sourceText: Optional[str] = field(default=None)
    document: Optional["Document"] = field(default=None)
    renderedOutput: Optional[str] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, section, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for rendered output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_read,
            document_process,
            output_write,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
