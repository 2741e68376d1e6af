import sys
from pathlib import Path


# Make `spotify_web_api` and `config` importable without installing the project.
_REPO_ROOT = str(Path(__file__).resolve().parents[1])
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)
