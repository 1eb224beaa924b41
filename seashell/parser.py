import logging
from dataclasses import dataclass, field
from typing import List, Optional

from seashell.errors import MalformedPipeline, MalformedRedirect
from seashell.tokenizer import WHITESPACE, tokenize

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadFrom:
    """Input redirect: `< path`"""
    path: str


@dataclass(frozen=True)
class WriteTo:
    """Output redirect: `> path` truncates, `>> path` appends"""
    path: str
    append: bool = False


@dataclass
class Stage:
    """One command of a pipeline. `args` excludes the command name."""
    name: str
    args: List[str] = field(default_factory=list)
    stdin: Optional[ReadFrom] = None
    stdout: Optional[WriteTo] = None

    @property
    def argv(self):
        return [self.name] + self.args


@dataclass
class Pipeline:
    """
    All stages parsed from one input line, in textual order.

    `background` and `request_autocomplete` describe the whole line, never a
    single stage.
    """
    stages: List[Stage] = field(default_factory=list)
    background: bool = False
    request_autocomplete: bool = False
    text: str = ""

    @property
    def is_empty(self):
        return not self.stages


def _is_operator(token):
    if token.quoted or not token.value:
        return False
    return token.value in ("|", "&") or token.value[0] in "<>"


def _split_redirect(value):
    """Return (operator, attached target) for a `<`, `>` or `>>` token."""
    if value.startswith(">>"):
        return ">>", value[2:]
    return value[0], value[1:]


def parse_command(line):
    """
    Parse one input line into a Pipeline.
    Raises ParseError subclasses on malformed input; never starts a process.
    """
    line = line.strip(WHITESPACE)
    background = request_autocomplete = False

    # trailing markers belong to the whole line
    if line.endswith("?"):
        request_autocomplete = True
        line = line[:-1].rstrip(WHITESPACE)
    elif line.endswith("&"):
        background = True
        line = line[:-1].rstrip(WHITESPACE)

    pipeline = Pipeline(
        background=background,
        request_autocomplete=request_autocomplete,
        text=line,
    )
    tokens = tokenize(line)

    name, args, stdin, stdout = None, [], None, None

    def close_stage(piped):
        nonlocal name, args, stdin, stdout
        if name is None:
            if piped or pipeline.stages:
                raise MalformedPipeline("missing command around '|'", line)
            if stdin or stdout:
                raise MalformedPipeline("missing command", line)
            return
        pipeline.stages.append(Stage(name, args, stdin, stdout))
        name, args, stdin, stdout = None, [], None, None

    i = 0
    while i < len(tokens):
        tok = tokens[i]
        i += 1

        if not _is_operator(tok):
            if name is None:
                name = tok.value
            else:
                args.append(tok.value)
            continue

        if tok.value == "|":
            close_stage(piped=True)
            continue
        if tok.value == "&":
            continue

        op, target = _split_redirect(tok.value)
        if not target:
            if i >= len(tokens) or _is_operator(tokens[i]):
                raise MalformedRedirect(f"missing target for '{op}'", line)
            target = tokens[i].value
            i += 1
        elif target[0] in "<>|&":
            raise MalformedRedirect(f"bad target for '{op}'", tok.value)

        # last redirect of a direction wins
        if op == "<":
            stdin = ReadFrom(target)
        else:
            stdout = WriteTo(target, append=(op == ">>"))

    close_stage(piped=False)

    log.debug("parsed %r into %d stage(s)", line, len(pipeline.stages))
    return pipeline


def format_pipeline(pipeline):
    """Human-readable dump of a parsed pipeline, used by --debug."""
    if pipeline.is_empty:
        return "<empty>"

    lines = [
        f"Background: {'yes' if pipeline.background else 'no'}",
        f"Autocomplete: {'yes' if pipeline.request_autocomplete else 'no'}",
    ]
    for idx, stage in enumerate(pipeline.stages):
        lines.append(f"Stage {idx}: <{stage.name}>")
        if stage.stdin:
            lines.append(f"\tstdin  < {stage.stdin.path}")
        if stage.stdout:
            op = ">>" if stage.stdout.append else ">"
            lines.append(f"\tstdout {op} {stage.stdout.path}")
        lines.append(f"\tArguments ({len(stage.args)}):")
        for n, arg in enumerate(stage.args):
            lines.append(f"\t\tArg {n}: {arg}")
    return "\n".join(lines)
