"""Coach voice agent: realtime voice conversation server and client.

Keep this module dependency-light: importing `coach_voice.client` should not
pull in the server stack.
"""

__all__: list[str] = []
