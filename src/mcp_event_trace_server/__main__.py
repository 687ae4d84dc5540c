"""Module entrypoint.

Allows:
    python -m mcp_event_trace_server
"""

from __future__ import annotations

from mcp_event_trace_server.server.log_server import main

if __name__ == "__main__":
    main()
