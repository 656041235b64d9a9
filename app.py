from __future__ import annotations
import sys

from ai_pr_review.cli import main

if __name__ == "__main__":
    sys.exit(main())
