import os
import sys

from hypothesis import settings

# Ensure tests can import the top-level modules (lexer, parser, ...) when
# pytest changes CWD.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

# Property tests lex/parse generated programs; timing varies across machines.
settings.register_profile("frontend", deadline=None, max_examples=200)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "frontend"))
