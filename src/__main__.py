#!/usr/bin/env python3
"""
litdown - literate document engine

Renders a document written as prose interleaved with code elements. Code
elements that reference a file pull the file in; code elements marked
``exec`` run and have their output spliced in after them. Sections become
pages separated by a break marker.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Markup:
    <code>x := 1</code>                        inline, rendered as-is
    <code src="main.go#setup"></code>          loaded from main.go
    <code language="sh" exec>ls</code>         run, output appended
    <section number="2">                       starts section/page 2

Usage:
    litdown inputdir/ outputdir/ --inputFile module.md

    The rendered document is written to outputdir/ under the same name
    (or --outputFile). Nothing is written if any stage fails.

Examples:
    # Render with a longer deadline
    litdown . out/ --inputFile module.md --timeout 30

    # Check structure without running anything
    litdown . out/ --inputFile module.md -p

    # Render only section 3, numbering from 2
    litdown . out/ --inputFile module.md --section 2 --page 3 -vv

Environment:
    LITDOWN_PATH     path of the document; its directory is the source root
    LITDOWN_ORIGIN   working directory for executed code
    LITDOWN_TIMEOUT  default deadline in seconds (5)
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import Engine, __version__, LOG, state_connectToLogger
from .lib.errors import LitdownError
from .models import ProgramState, RunOptions, pipeline


DISPLAY_TITLE = r"""
  _ _ _      _
 | (_) |_ __| |_____ __ ___ _
 | | |  _/ _` / _ \ V  V / ' \
 |_|_|\__\__,_\___/\_/\_/|_||_|

  Literate document engine
"""

# Define CLI arguments
parser = ArgumentParser(
    description="litdown - render documents with executable code elements",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input document (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default="",
    type=str,
    help="Output filename (relative to outputdir); defaults to the input filename",
)

parser.add_argument(
    "--section",
    default=0,
    type=int,
    help="Number of the first section; 0 keeps the document's own numbering",
)

parser.add_argument(
    "--page",
    default=0,
    type=int,
    help="Render only this section number; 0 renders all pages",
)

parser.add_argument(
    "--timeout",
    default=0.0,
    type=float,
    help="Seconds allowed for the whole run; 0 uses LITDOWN_TIMEOUT (5)",
)

parser.add_argument(
    "-p",
    "--parseOnly",
    action="store_true",
    default=False,
    help="Only parse the document; do not execute code",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all paths.

    Verifies the input file exists, creates the output directory and
    resolves RunOptions (root, filename and working directory come from
    LITDOWN_PATH / LITDOWN_ORIGIN when set).

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input document
            - outputTargetFile: Path the rendered output will be written to
            - runOptions: Resolved RunOptions
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.outputTargetFile = state.outputdir / (state.outputFile or Path(state.inputFile).name)
    LOG(f"Output file: {state.outputTargetFile}", level=2)

    state.runOptions = RunOptions.options_resolve(
        inputdir=input_file.parent,
        inputFile=input_file.name,
        section=state.section,
        page=state.page,
        timeout=state.timeout,
        parse_only=state.parseOnly,
    )
    LOG(f"Source root: {state.runOptions.root}", level=2)
    LOG(f"Working directory: {state.runOptions.workdir}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the source document.

    Args:
        inputstate: Program state with inputSourceFile set

    Returns:
        ProgramState with added field:
            - sourceText: Raw markup

    Exits:
        1 if the file cannot be read
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def document_process(inputstate: ProgramState) -> ProgramState:
    """
    Parse, execute, paginate and render the document under the deadline.

    Args:
        inputstate: Program state with sourceText and runOptions

    Returns:
        ProgramState with added fields:
            - document: Parsed (and executed) Document
            - renderedOutput: Final text

    Exits:
        1 on any parse, execution, pagination or timeout error
    """

    state = inputstate.copy()

    LOG("Processing document...", level=1)

    engine = Engine(state.runOptions)
    try:
        state.renderedOutput = engine.run(state.sourceText)
        state.document = engine.document_get()
    except LitdownError as e:
        print(f"Error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the rendered document.

    Args:
        inputstate: Program state with renderedOutput

    Returns:
        ProgramState unchanged

    Exits:
        1 if there is no output or it cannot be written
    """
    state = inputstate.copy()

    if state.renderedOutput is None:
        print("Error: Nothing rendered", file=sys.stderr)
        sys.exit(1)

    try:
        state.outputTargetFile.write_text(state.renderedOutput + "\n", encoding="utf-8")
    except OSError as e:
        print(f"Error writing output file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Wrote {state.outputTargetFile}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Summarize the run for the user.

    Args:
        inputstate: Program state after output_write

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()

    if state.verbosity >= 1:
        LOG("\n✓ Rendering successful!", level=1)
        LOG(f"  Output: {state.outputTargetFile}", level=1)
        if state.document is not None:
            LOG(f"  Nodes: {len(state.document.nodes)}", level=1)
            LOG(f"  Sections: {state.document.sections_count()}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="litdown - Literate document engine",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - render a literate document.

    Orchestrates the pipeline:
        1. env_check: Validate paths, resolve RunOptions
        2. source_read: Read the document
        3. document_process: Parse, execute, paginate, render
        4. output_write: Write the rendered document
        5. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the source document
        outputdir: Directory where the rendered document is written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_read, document_process, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
