"""
The MODEL layer contains pure data structures and the rotation algebra.
It has NO knowledge of Qt, of output sinks, or of how turns are delivered.
It deals with Turns, the Canonical Path and the Keymap.
"""
