"""
webflow_starter package

Interactive generator for Webflow front-end projects (Vite bundling, GitHub
repositories served through the jsDelivr CDN).

Key responsibilities are split across modules:
- `answers.py`: the setup answers record and its derived CDN repo
- `interview.py`: interactive questions -> `SetupAnswers`
- `renderer.py`: copy the packaged template tree into the destination
- `emitter.py`: render `starter.config.js` and `package.json`
- `provisioner.py`: SSH key / GitHub auth / key registration checks
- `github_client.py`: GitHub REST API backend (used when GITHUB_TOKEN is set)
- `config.py`: settings from environment variables
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
