import os
import sys
import tempfile
from pathlib import Path

# Keep config writes out of the package directory; must run before huematch is imported.
_TMP = tempfile.mkdtemp(prefix="huematch-tests-")
os.environ["HUEMATCH_CONFIG"] = os.path.join(_TMP, "config.json")
os.environ["HUEMATCH_HOME"] = os.path.join(_TMP, "data")

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
