"""
qtsetup - Qt SDK installation for CI runners.

Reuses a cached Qt installation when one exists, otherwise drives the Qt
online installer unattended, then publishes the installation to the runner.
"""

__version__ = "1.0.0"
