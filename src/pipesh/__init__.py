"""An interactive shell that pipes the output of commands into embedded code blocks.
"""
