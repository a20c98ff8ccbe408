"""
karasim test suite.

Tests are organized by module:

    test_geometry.py         - Coordinates and Direction algebra
    test_grid.py             - Cells, grid decoding and Kara extraction
    test_kara.py             - Sensors and mutators
    test_actions.py          - Action log and recording decorator
    test_stepper.py          - Timed replay decorator
    test_game.py             - Capture/replay protocol
    test_render.py           - Text and RGB frames
    test_worlds_routines.py  - World catalogue and routine loading
    test_config.py           - KaraConfig
    test_rewards.py          - Reward functions
    test_env.py              - KaraEnv
    test_cli.py              - Command-line interface

Fixtures are defined in conftest.py and shared across all test modules.
"""
