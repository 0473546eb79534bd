"""``weex completion`` — print a shell completion script.

The reserved ``completion`` command never reaches the core.  It writes
a bash or zsh script to stdout; users install it with e.g.
``weex completion >> ~/.bashrc``.
"""

from __future__ import annotations

import os
import sys

from weex_cli.cli import exit_codes

BASE_COMMANDS: tuple[str, ...] = ("completion", "repair")
GLOBAL_FLAGS: tuple[str, ...] = ("--compiled", "--registry", "--force", "--verbose")

_BASH_TEMPLATE = """\
###-begin-{prog}-completion-###
_{func}_completion() {{
  local cur="${{COMP_WORDS[COMP_CWORD]}}"
  if [[ "$cur" == -* ]]; then
    COMPREPLY=( $(compgen -W "{flags}" -- "$cur") )
  elif [[ $COMP_CWORD -eq 1 ]]; then
    COMPREPLY=( $(compgen -W "{commands}" -- "$cur") )
  else
    COMPREPLY=( $(compgen -f -- "$cur") )
  fi
}}
complete -o default -F _{func}_completion {prog}
###-end-{prog}-completion-###
"""

_ZSH_TEMPLATE = """\
###-begin-{prog}-completion-###
#compdef {prog}
_{func}_completion() {{
  _arguments \\
    '1:command:({commands})' \\
    '*:file:_files' \\
    {flag_specs}
}}
compdef _{func}_completion {prog}
###-end-{prog}-completion-###
"""


def detect_shell(argv: tuple[str, ...]) -> str:
    """Pick ``bash`` or ``zsh`` from argv (``completion zsh``) or ``$SHELL``."""
    for arg in argv[1:]:
        if arg in ("bash", "zsh"):
            return arg
    return "zsh" if os.path.basename(os.environ.get("SHELL", "")) == "zsh" else "bash"


def render_script(shell: str, prog: str = "weex") -> str:
    func = prog.replace("-", "_")
    commands = " ".join(BASE_COMMANDS)
    if shell == "zsh":
        flag_specs = " \\\n    ".join(f"'{flag}[{flag[2:]}]'" for flag in GLOBAL_FLAGS)
        return _ZSH_TEMPLATE.format(
            prog=prog,
            func=func,
            commands=commands,
            flag_specs=flag_specs,
        )
    return _BASH_TEMPLATE.format(
        prog=prog,
        func=func,
        commands=commands,
        flags=" ".join(GLOBAL_FLAGS),
    )


def start_completion(argv: tuple[str, ...]) -> int:
    """Write the completion script for the detected shell to stdout."""
    sys.stdout.write(render_script(detect_shell(argv)))
    return exit_codes.SUCCESS
