"""Allow `python -m learnerdash`."""

from learnerdash.cli.dashboard import main

main()
