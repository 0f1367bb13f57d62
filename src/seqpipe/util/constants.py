"""Config keys read through get_config().

Set via ~/.seqpipe.toml or SEQPIPE_* environment variables.
"""
# When true (the default), a sequence over a Vec, HashMap or HashSet raises
# ConcurrentModificationError if the collection changes size while it drains.
ITERATION_GUARD = "iteration_guard"

# "logger:LEVEL,..." and "logger:path,..." strings used by configure_logger()
LOGGER_LEVELS = "logger_levels"
LOGGER_FILES = "logger_files"
