"""Entry point: ``python -m desk_assist``."""

from desk_assist.serving.app import run

if __name__ == "__main__":
    run()
