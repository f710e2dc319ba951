"""TCP File Transfer (tcpft)

One file per connection, pushed from a client to a listening server:
- a 16-byte zero-padded ASCII header carries the body length
- the body follows as raw bytes, no trailer
- the server handles connections strictly one at a time and names
  each received file from a sequential counter

Framing, byte-exact transfer loops and connection lifecycles live in
separate modules so each can be tested on its own.
"""

__all__ = []
