"""Runtime package.

Keep this module dependency-light: importing `coach_voice.runtime.*` in unit
tests should not open network clients or touch the database.
"""

__all__: list[str] = []
