"""Infrastructure layer — filesystem, git subprocess calls, document driver.

Depends on the engine for its error types; never on services, commands,
or output.
"""
