import os
import sys
import warnings
from pathlib import Path

warnings.filterwarnings("ignore", category=DeprecationWarning, module="livekit.*")

# Keep token minting deterministic regardless of the developer's env.local.
os.environ.setdefault("DEMO_MODE", "false")

# Ensure the project root is on sys.path so `quickroom` and `tests` resolve
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from tests.fixtures.room_fixtures import *  # noqa: E402, F403
