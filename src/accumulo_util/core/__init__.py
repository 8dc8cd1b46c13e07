"""
Configuration, constants and error types shared by the commands.
"""
