"""Entry point for the match-three cascade prototype.

Sets up the engine (ECS world, event bus, systems) and the Arcade window.
"""
from gemcascade.app import main

if __name__ == "__main__":
    main()
