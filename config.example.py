# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/todo_app/config.py for how each value is parsed.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: TodoApp).",
    "TODO_VERSION": "Version reported by / and /health (default: 1.0.0).",
    "TODO_LOG_LEVEL": "Logging level (default: INFO).",
    "TODO_ENV": "development | production; production hides error details (fallback: APP_ENV).",
    # HTTP server
    "TODO_HOST": "Listen host (default: localhost).",
    "TODO_PORT": "Listen port (default: 3001).",
    "TODO_CORS_ORIGINS": "Comma/space separated allowed browser origins (default: localhost:3000/3001).",
    # Console client
    "TODO_API_URL": "Base URL the console talks to (default: http://<host>:<port>).",
    "TODO_HEALTH_INTERVAL_SECONDS": "Connectivity polling interval (default: 30).",
    "TODO_REQUEST_TIMEOUT_SECONDS": "HTTP timeout for the console client (default: 10).",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory for logs and tasks (default: .local/todo).",
    "TODO_TASKS_PATH": "Tasks JSON file (default: <data_dir>/tasks.json).",
}
