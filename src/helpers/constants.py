"""Common configuration constants used across the application."""

# Grafana Server Defaults
DEFAULT_GRAFANA_URL = "http://localhost:3001/"
"""Grafana instance used when neither an argument nor GRAFANA_URL is given"""

DEFAULT_DASHBOARD_FILE = "static/model.json"
"""Dashboard definition loaded by the CLI, relative to the working directory"""

DEFAULT_FOLDER_ID = 0
"""Grafana folder ID (0 is the General folder)"""

# Grafana API Paths (relative to the base URL)
DASHBOARDS_DB_PATH = "api/dashboards/db"
"""Create or update a dashboard"""

DASHBOARD_BY_UID_PATH = "api/dashboards/uid/{uid}"
"""Address a dashboard by its UID"""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 5.0
"""Default HTTP request timeout in seconds (the httpx default)"""

# Credential Format
BASIC_AUTH_SEPARATOR = ":"
"""Separator between username and password in a basic auth credential"""

# Datasource Rewriting
DATASOURCE_VARIABLE_TYPE = "datasource"
"""Templating variable type that selects a datasource itself"""

__all__ = [
    "BASIC_AUTH_SEPARATOR",
    "DASHBOARDS_DB_PATH",
    "DASHBOARD_BY_UID_PATH",
    "DATASOURCE_VARIABLE_TYPE",
    "DEFAULT_DASHBOARD_FILE",
    "DEFAULT_FOLDER_ID",
    "DEFAULT_GRAFANA_URL",
    "DEFAULT_TIMEOUT",
]
