"""sesh — jump between projects and land in a ready-made tmux session."""

__version__ = "0.2.0"
