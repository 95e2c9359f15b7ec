"""Client boundary for the external business-process-automation engine.

- `client`: the HTTP client (`BusinessProcessAutomationClient`)
- `models`: wire models exchanged with the engine
- `errors`: the failure taxonomy raised by the client
"""
