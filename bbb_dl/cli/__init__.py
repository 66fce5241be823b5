"""
Command-line interface: Typer commands, Rich progress display and formatters.
"""
