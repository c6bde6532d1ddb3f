"""Tasks vertical configuration.

Re-exports the TasksConfig from the patterns module, loaded from the
environment once at import.
"""

from patterns.domain_config import TasksConfig

# Default configuration instance
config = TasksConfig.from_env()
