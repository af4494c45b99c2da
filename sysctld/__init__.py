"""
Read-only sysctl server.

Serves the host's integer and string sysctl values as JSON documents over
HTTP. See DESIGN.md for the request pipeline.
"""
