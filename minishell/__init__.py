"""Core of a small Bourne-style shell: tokens, syntax checks, variables, built-ins and execution."""

__version__ = "0.1.0"

__all__ = [
    "builtins",
    "command",
    "environment",
    "executor",
    "heredoc",
    "pathsearch",
    "redirections",
    "syntax",
    "tokens",
]