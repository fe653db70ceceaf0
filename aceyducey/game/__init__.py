"""
The Acey Ducey game: state, transitions, the interactive game loop and a
headless simulator.
"""
