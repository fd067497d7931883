"""
Entry point for the learner dashboard CLI.

Run with:
    python main.py profile
    python main.py bookmarks list --all
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from learnerdash.cli.dashboard import main

if __name__ == "__main__":
    main()
