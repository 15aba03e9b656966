"""Convenience shim to run the gist sync without installing the package."""

from __future__ import annotations

import sys

from gist2repo.pipeline.runner import main as run_pipeline


if __name__ == "__main__":
    run_pipeline(sys.argv[1:])
