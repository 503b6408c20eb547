"""Pytest hooks for claimform. Remind that AI mode needs a key in this terminal session."""

import os


def pytest_configure(config):
    """Tests use MockProvider; live AI fills need GROQ_API_KEY or OPENAI_API_KEY."""
    if not (os.environ.get("GROQ_API_KEY") or os.environ.get("OPENAI_API_KEY")):
        print(
            "\nTip: AI mode needs a key for this session: "
            "export GROQ_API_KEY=...  (or OPENAI_API_KEY with CLAIMFORM_AI_PROVIDER=openai)\n",
            end="",
        )
