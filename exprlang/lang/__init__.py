"""Error handling, sessions and the interactive shell built around exprlang.pure."""
