"""Wire codec for HDHomeRun tuner control packets, with an MCP debugging server."""

__version__ = "0.1.0"
