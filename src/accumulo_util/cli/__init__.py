"""
Initialize the CLI package. Contains the Typer application for accumulo-util.
"""
