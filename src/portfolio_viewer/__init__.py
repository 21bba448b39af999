"""Portfolio viewer: access-code gate and guided portfolio walkthrough."""

__version__ = "1.0.0"
