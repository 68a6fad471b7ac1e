# src/content_planner/__main__.py

from .cli.main import main

main()
