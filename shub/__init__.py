"""
shub package

This package implements shub, a small CLI over the GitHub REST API.

Key responsibilities are split across modules:
- `models.py`: repository references, language filters, repository summaries
- `settings.py`: repository settings record and its TOML file format
- `github_client.py`: isolated GitHub REST API interactions (pagination, auth)
- `display.py`: line-oriented formatting of repository rows
- `config.py`: credentials and API location from env / .env / YAML file
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
