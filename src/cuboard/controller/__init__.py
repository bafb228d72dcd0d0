"""
The CONTROLLER layer turns a stream of Turns into Commit/Retract events.
It owns the session state and delivers events to an output sink.
"""
